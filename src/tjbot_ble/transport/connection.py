"""BLE connection management (client side)."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from bleak import BleakClient, BleakScanner
from bleak_retry_connector import BleakClientWithServiceCache, establish_connection

from ..exceptions import BLEConnectionError, BLETimeoutError, InvalidResponseError
from ..protocol import (
    COMMAND_SERVICE_UUID,
    LISTEN_CHAR_UUID,
    RESPONSE_CHAR_UUID,
    FrameAssembler,
    parse_response,
)

if TYPE_CHECKING:
    from bleak.backends.device import BLEDevice

_LOGGER = logging.getLogger(__name__)

ATT_WRITE_OVERHEAD = 3  # opcode (1) + handle (2)
DEFAULT_WRITE_SIZE = 20  # payload of the minimum 23-byte ATT MTU


class BLEConnection:
    """Manages the BLE connection to a TJBot.

    Features:
    - Automatic retry logic with bleak-retry-connector
    - Service caching for faster reconnections
    - Context manager for automatic cleanup
    - Frames split to the negotiated MTU on write
    - Response notifications reassembled into decoded replies
    - Listen notifications queued as text
    """

    def __init__(
            self,
            mac_address: str,
            ble_device: BLEDevice | None = None,
            timeout: float = 10.0,
            max_attempts: int = 4,
            use_services_cache: bool = True,
    ):
        """Initialize BLE connection manager.

        Args:
            mac_address: Device MAC address
            ble_device: Optional BLEDevice from a previous scan
            timeout: Connection timeout in seconds (default: 10)
            max_attempts: Maximum connection attempts for bleak-retry-connector (default: 4)
            use_services_cache: Enable GATT service caching for faster reconnections (default: True)
        """
        self.mac_address = mac_address
        self.ble_device = ble_device
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.use_services_cache = use_services_cache

        self._client: BleakClient | None = None
        self._response_assembler = FrameAssembler(name="response")
        self._response_queue: asyncio.Queue[Any] = asyncio.Queue()
        self._listen_queue: asyncio.Queue[str] = asyncio.Queue()

    async def __aenter__(self) -> BLEConnection:
        """Connect to device (context manager entry)."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Disconnect from device (context manager exit)."""
        await self.disconnect()

    async def connect(self) -> None:
        """Establish BLE connection to device.

        Raises:
            BLEConnectionError: If connection fails
            BLETimeoutError: If connection times out
        """
        if self._client and self._client.is_connected:
            return  # Already connected

        try:
            _LOGGER.debug(
                "Connecting to %s with bleak-retry-connector (max_attempts=%d)",
                self.mac_address,
                self.max_attempts
            )

            if self.ble_device:
                device = self.ble_device
            else:
                device = await BleakScanner.find_device_by_address(
                    self.mac_address,
                    timeout=self.timeout
                )
                if device is None:
                    raise BLEConnectionError(
                        f"Device {self.mac_address} not found during scan"
                    )

            self._client = await establish_connection(
                client_class=BleakClientWithServiceCache,
                device=device,
                name=device.name or self.mac_address,
                max_attempts=self.max_attempts,
                use_services_cache=self.use_services_cache,
                timeout=self.timeout,
            )

            _LOGGER.debug("Connected to %s", self.mac_address)

            await self._setup_notifications()

        except asyncio.TimeoutError as e:
            raise BLETimeoutError(
                f"Connection timeout after {self.timeout}s"
            ) from e
        except BLEConnectionError:
            raise
        except Exception as e:
            raise BLEConnectionError(
                f"Failed to connect: {e}"
            ) from e

    async def disconnect(self) -> None:
        """Disconnect from device."""
        if self._client and self._client.is_connected:
            try:
                _LOGGER.debug("Disconnecting from %s", self.mac_address)
                await self._client.disconnect()
            except Exception as e:
                _LOGGER.warning("Error during disconnect: %s", e)
            finally:
                self._client = None
        self._response_assembler.reset()

    async def _setup_notifications(self) -> None:
        """Subscribe to the response and listen characteristics.

        Raises:
            BLEConnectionError: If the command service is not found
        """
        if not self._client or not self._client.is_connected:
            raise BLEConnectionError("Not connected")

        service = self._client.services.get_service(COMMAND_SERVICE_UUID)
        if not service:
            raise BLEConnectionError(
                f"Service {COMMAND_SERVICE_UUID} not found"
            )

        await self._client.start_notify(RESPONSE_CHAR_UUID, self._response_callback)
        await self._client.start_notify(LISTEN_CHAR_UUID, self._listen_callback)

        _LOGGER.debug("Notifications started")

    def _response_callback(self, sender, data: bytearray) -> None:
        """Reassemble response chunks and queue each complete reply."""
        for frame in self._response_assembler.feed(bytes(data)):
            try:
                self._response_queue.put_nowait(parse_response(frame))
            except InvalidResponseError as e:
                _LOGGER.warning("Discarding undecodable response: %s", e)
                self._response_queue.put_nowait(e)

    def _listen_callback(self, sender, data: bytearray) -> None:
        """Queue one speech-to-text item."""
        self._listen_queue.put_nowait(bytes(data).decode("utf-8", errors="replace"))

    @property
    def write_size(self) -> int:
        """Largest write payload the current MTU allows."""
        if not self._client:
            return DEFAULT_WRITE_SIZE
        return max(self._client.mtu_size - ATT_WRITE_OVERHEAD, DEFAULT_WRITE_SIZE)

    async def write_frame(self, char_uuid: str, frame: bytes) -> None:
        """Write a terminated frame to a characteristic in MTU-sized pieces.

        Args:
            char_uuid: Command or request characteristic
            frame: Encoded frame, terminator included

        Raises:
            BLEConnectionError: If not connected or a write is rejected
        """
        if not self._client or not self._client.is_connected:
            raise BLEConnectionError("Not connected")

        size = self.write_size
        for start in range(0, len(frame), size):
            piece = frame[start:start + size]
            try:
                await self._client.write_gatt_char(
                    char_uuid,
                    piece,
                    response=True,  # Each write is acknowledged before the next
                )
            except Exception as e:
                raise BLEConnectionError(f"Write failed: {e}") from e

        _LOGGER.debug("Wrote %d byte frame to %s", len(frame), char_uuid)

    def clear_responses(self) -> int:
        """Discard queued replies nobody is waiting for.

        Returns:
            Number of replies discarded
        """
        discarded = 0
        while not self._response_queue.empty():
            self._response_queue.get_nowait()
            discarded += 1
        if discarded:
            _LOGGER.warning("Discarded %d stale response(s)", discarded)
        return discarded

    async def read_response(self, timeout: float = 5.0) -> Any:
        """Read the next decoded reply.

        Raises:
            BLETimeoutError: If no reply is received within timeout
            InvalidResponseError: If the reply could not be decoded
        """
        try:
            value = await asyncio.wait_for(
                self._response_queue.get(),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise BLETimeoutError(
                f"No response received within {timeout}s"
            ) from e
        if isinstance(value, InvalidResponseError):
            raise value
        return value

    async def read_listen_text(self, timeout: float | None = None) -> str:
        """Read the next listen item (waits forever when timeout is None).

        Raises:
            BLETimeoutError: If no text is received within timeout
        """
        try:
            return await asyncio.wait_for(self._listen_queue.get(), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise BLETimeoutError(
                f"No listen text received within {timeout}s"
            ) from e

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to device."""
        return self._client is not None and self._client.is_connected
