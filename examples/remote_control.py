"""Find a TJBot over BLE and drive it from the command line.

Usage:
    uv run python examples/remote_control.py --scan
    uv run python examples/remote_control.py AA:BB:CC:DD:EE:FF shine '{"color": "#00ff00"}'
    uv run python examples/remote_control.py AA:BB:CC:DD:EE:FF see --request
    uv run python examples/remote_control.py AA:BB:CC:DD:EE:FF --listen 30
"""

from __future__ import annotations

import argparse
import asyncio
import json
from datetime import datetime

from bleak import BleakScanner

from tjbot_ble import TJBOT_SERVICE_UUID, BLETimeoutError, RemoteCommandError, TJBotDevice


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


async def scan(duration: float) -> None:
    """Print robots advertising the TJBot service."""
    print(f"Scanning for TJBots ({TJBOT_SERVICE_UUID}) for {duration:.1f}s...")
    found = await BleakScanner.discover(timeout=duration, service_uuids=[TJBOT_SERVICE_UUID])
    for device in found:
        print(f"  {device.address}  {device.name or 'Unknown'}")
    if not found:
        print("  no robots found")


async def send(address: str, command: str, args: dict, as_request: bool) -> None:
    """Send one command (or request) and print the reply."""
    async with TJBotDevice(address) as tj:
        if not as_request:
            await tj.command(command, args)
            print(f"[{_timestamp()}] sent {command}")
            return
        try:
            reply = await tj.request(command, args)
        except RemoteCommandError as err:
            print(f"[{_timestamp()}] {err}")
            return
        print(json.dumps(reply, indent=2))


async def listen(address: str, duration: float) -> None:
    """Start listening on the robot and print transcribed text."""
    async with TJBotDevice(address) as tj:
        await tj.listen()
        print(f"[{_timestamp()}] listening for {duration:.1f}s (Ctrl+C to stop)")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration
        try:
            async for text in tj.listen_texts(timeout=duration):
                print(f"[{_timestamp()}] heard: {text}")
                if loop.time() >= deadline:
                    break
        except BLETimeoutError:
            pass
        finally:
            await tj.stop_listening()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remote-control a TJBot over BLE.")
    parser.add_argument("address", nargs="?", help="Robot MAC address")
    parser.add_argument("command", nargs="?", help="Command name, e.g. shine or see")
    parser.add_argument("args", nargs="?", default="{}", help="Command args as a JSON object")
    parser.add_argument("--scan", type=float, nargs="?", const=10.0, help="Scan for robots (seconds)")
    parser.add_argument("--request", action="store_true", help="Send on the request channel and wait for a reply")
    parser.add_argument("--listen", type=float, metavar="SECONDS", help="Stream speech-to-text for SECONDS")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.scan is not None:
        coro = scan(args.scan)
    elif args.address and args.listen is not None:
        coro = listen(args.address, args.listen)
    elif args.address and args.command:
        coro = send(args.address, args.command, json.loads(args.args), args.request)
    else:
        raise SystemExit("Give --scan, an address with --listen, or an address and a command")
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
