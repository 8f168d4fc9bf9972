"""
Expose SwitchBot Bluetooth switch commands as MCP tools.

Every tool call runs the homebridge-switchbot-ble command-line program once
and returns what it printed. Start the server with:
    pip install -e .
    switchbot-mcp                      # or: python -m switchbot_mcp_bridge
"""

import argparse
import logging
import signal
import sys
from functools import partial
from typing import Annotated, List, Optional

import pydantic
from fastmcp import FastMCP
from pydantic import Field

from .catalog import (
    DEVICE_ID_DESCRIPTION,
    HELP_TEXT,
    MAC_ADDRESS_DESCRIPTION,
    OPERATIONS,
    CommandName,
)
from .config import Settings
from .dispatcher import Dispatcher
from .runner import run_switchbot_command

# Set up logging to stderr; stdout carries the MCP stream
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr
)
logger = logging.getLogger("switchbot_mcp.server")

DeviceId = Annotated[str, Field(min_length=1, description=DEVICE_ID_DESCRIPTION)]
OptionalDeviceId = Annotated[Optional[str], Field(description=DEVICE_ID_DESCRIPTION)]
MacAddress = Annotated[str, Field(min_length=1, description=MAC_ADDRESS_DESCRIPTION)]


def _tool_options(name: str) -> dict:
    op = OPERATIONS[name]
    return {"name": op.name, "description": op.description, "annotations": op.annotations()}


def create_server(dispatcher: Optional[Dispatcher] = None, settings: Optional[Settings] = None) -> FastMCP:
    """Build the FastMCP server with every catalog tool and both resources."""
    if dispatcher is None:
        # without explicit settings the runner reads the environment on each call
        runner = partial(run_switchbot_command, settings=settings) if settings else run_switchbot_command
        dispatcher = Dispatcher(OPERATIONS, runner=runner)

    mcp = FastMCP("switchbot", instructions="Control SwitchBot Bluetooth switch devices.")

    # ------------------------------------------------------------------
    # MCP tools
    # ------------------------------------------------------------------

    @mcp.tool(**_tool_options("scan"))
    def scan() -> str:
        return dispatcher.invoke("scan")

    @mcp.tool(**_tool_options("status"))
    def status(deviceId: OptionalDeviceId = None) -> str:
        return dispatcher.invoke("status", {"deviceId": deviceId})

    @mcp.tool(**_tool_options("press"))
    def press(deviceId: DeviceId) -> str:
        return dispatcher.invoke("press", {"deviceId": deviceId})

    @mcp.tool(**_tool_options("on"))
    def turn_on(deviceId: DeviceId) -> str:
        return dispatcher.invoke("on", {"deviceId": deviceId})

    @mcp.tool(**_tool_options("off"))
    def turn_off(deviceId: DeviceId) -> str:
        return dispatcher.invoke("off", {"deviceId": deviceId})

    @mcp.tool(**_tool_options("auto-on"))
    def auto_on() -> str:
        return dispatcher.invoke("auto-on")

    @mcp.tool(**_tool_options("auto-off"))
    def auto_off() -> str:
        return dispatcher.invoke("auto-off")

    @mcp.tool(**_tool_options("server"))
    def server_status() -> str:
        return dispatcher.invoke("server")

    @mcp.tool(**_tool_options("normalize"))
    def normalize(macAddress: MacAddress) -> str:
        return dispatcher.invoke("normalize", {"macAddress": macAddress})

    @mcp.tool(**_tool_options("find"))
    def find(macAddress: MacAddress) -> str:
        return dispatcher.invoke("find", {"macAddress": macAddress})

    @mcp.tool(**_tool_options("run"))
    def run(
        command: Annotated[CommandName, Field(description="SwitchBot command")],
        deviceId: OptionalDeviceId = None,
    ) -> str:
        return dispatcher.invoke("run", {"command": command, "deviceId": deviceId})

    # ------------------------------------------------------------------
    # MCP resources
    # ------------------------------------------------------------------

    @mcp.resource("help://switchbot", name="help", mime_type="text/markdown")
    def get_help() -> str:
        """SwitchBot MCP tool usage guide."""
        logger.info("Getting help information")
        return HELP_TEXT

    @mcp.resource("devices://list", name="devices", mime_type="text/plain")
    def get_devices() -> str:
        """Nearby SwitchBot devices, from a fresh scan on every read."""
        logger.info("Scanning for device list resource")
        return dispatcher.invoke("scan")

    return mcp


# Module-level instance so `fastmcp run` can find the server
mcp = create_server()


# ----------------------------------------------------------------------
# Main function
# ----------------------------------------------------------------------

def _handle_sigterm(signum, frame):
    logger.info("Received SIGTERM signal, shutting down server")
    sys.exit(0)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the MCP server over stdio."""
    parser = argparse.ArgumentParser(description="SwitchBot MCP Server")
    parser.add_argument("--cli-path", help="Path to the SwitchBot CLI (bot-cmd.mjs)")
    parser.add_argument("--interpreter", help="Program used to run the CLI (default: node)")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for each CLI call")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
        overrides = {
            "cli_path": args.cli_path,
            "interpreter": args.interpreter,
            "timeout": args.timeout,
        }
        settings = Settings(**{**settings.model_dump(), **{k: v for k, v in overrides.items() if v is not None}})
    except pydantic.ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    level = "DEBUG" if args.debug else settings.log_level
    logging.getLogger().setLevel(level)

    logger.info("Starting SwitchBot MCP server...")
    logger.info(f"Using SwitchBot CLI: {settings.interpreter} {settings.cli_path}")
    signal.signal(signal.SIGTERM, _handle_sigterm)

    try:
        # Run over stdio so MCP clients can spawn it locally.
        create_server(settings=settings).run()
    except KeyboardInterrupt:
        logger.info("Received SIGINT signal, shutting down server")
    except Exception as e:
        logger.error(f"Error running MCP server: {e}", exc_info=True)
        return 1

    logger.info("MCP transport connection closed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
