"""BLE transport (client side)."""

from .connection import BLEConnection

__all__ = ["BLEConnection"]
