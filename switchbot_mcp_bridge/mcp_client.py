"""
A simple client for interacting with the SwitchBot MCP server.

Usage:
    python -m switchbot_mcp_bridge.mcp_client

This client can be used directly or as a module to drive SwitchBot devices.
"""

import asyncio
import re
import sys
from typing import Any, Dict, List, Optional, Union

from fastmcp import Client, FastMCP
from fastmcp.client.transports import StdioTransport

DEVICE_ID_PATTERN = re.compile(r"Device ID: ([a-f0-9:]+)", re.IGNORECASE)


def extract_device_ids(text: str) -> List[str]:
    """Pull device ids out of scan output ("Device ID: aa:bb:..." lines)."""
    return [match.strip() for match in DEVICE_ID_PATTERN.findall(text or "")]


def _content_text(contents) -> str:
    # CallToolResult exposes .content; read_resource returns the list directly
    items = getattr(contents, "content", contents)
    return "\n".join(getattr(item, "text", "") for item in items)


class SwitchBotClient:
    """Client for interacting with the SwitchBot MCP server."""

    def __init__(self, server: Union[str, FastMCP, StdioTransport, None] = None):
        """
        Initialize the SwitchBot MCP client.

        Args:
            server: Server script path, transport or in-process FastMCP server;
                defaults to spawning `python -m switchbot_mcp_bridge`
        """
        if server is None:
            server = StdioTransport(command=sys.executable, args=["-m", "switchbot_mcp_bridge"])
        self.server = server
        self.client = Client(server)

    async def __aenter__(self):
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.__aexit__(exc_type, exc_val, exc_tb)

    async def _call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        result = await self.client.call_tool(name, arguments or {})
        return _content_text(result)

    async def scan(self) -> str:
        return await self._call("scan")

    async def status(self, device_id: Optional[str] = None) -> str:
        """
        Get device status.

        Args:
            device_id: MAC address of one device; omit to query all devices

        Returns:
            The CLI's status text
        """
        return await self._call("status", {"deviceId": device_id} if device_id else {})

    async def press(self, device_id: str) -> str:
        return await self._call("press", {"deviceId": device_id})

    async def turn_on(self, device_id: str) -> str:
        return await self._call("on", {"deviceId": device_id})

    async def turn_off(self, device_id: str) -> str:
        return await self._call("off", {"deviceId": device_id})

    async def auto_on(self) -> str:
        return await self._call("auto-on")

    async def auto_off(self) -> str:
        return await self._call("auto-off")

    async def server_status(self) -> str:
        return await self._call("server")

    async def normalize(self, mac_address: str) -> str:
        return await self._call("normalize", {"macAddress": mac_address})

    async def find(self, mac_address: str) -> str:
        return await self._call("find", {"macAddress": mac_address})

    async def run(self, command: str, device_id: Optional[str] = None) -> str:
        """
        Execute any SwitchBot command through the generic `run` tool.

        Args:
            command: One of the catalog commands, e.g. "press"
            device_id: Optional device MAC address

        Returns:
            The CLI's output text
        """
        arguments = {"command": command}
        if device_id:
            arguments["deviceId"] = device_id
        return await self._call("run", arguments)

    async def help(self) -> str:
        return _content_text(await self.client.read_resource("help://switchbot"))

    async def list_devices(self) -> List[str]:
        """Read devices://list and return the device ids found in it."""
        text = _content_text(await self.client.read_resource("devices://list"))
        return extract_device_ids(text)


async def demo():
    """Scan for devices and print their status."""
    async with SwitchBotClient() as client:
        devices = await client.list_devices()
        print(f"Found {len(devices)} devices")

        for device_id in devices:
            print(f"{device_id}: {await client.status(device_id)}")


if __name__ == "__main__":
    asyncio.run(demo())
