"""
The fixed catalog of SwitchBot operations exposed as MCP tools.

Each entry maps one tool name onto one CLI command. The table is built once
at import time and never mutated.
"""

from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict

# ----------------------------------------------------------------------
# Types
# ----------------------------------------------------------------------


class ParameterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    required: bool = True
    kind: Literal["string", "command"] = "string"


class Operation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Tuple[ParameterSpec, ...] = ()
    read_only: bool = False
    destructive: bool = False

    def parameter(self, name: str) -> Optional[ParameterSpec]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def annotations(self) -> Dict[str, Any]:
        """MCP tool annotations for this operation (advisory only)."""
        return {"readOnlyHint": self.read_only, "destructiveHint": self.destructive}


# ----------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------

DEVICE_ID_DESCRIPTION = "Device ID (MAC address)"
MAC_ADDRESS_DESCRIPTION = "MAC address"

CommandName = Literal[
    "scan", "status", "press", "on", "off",
    "auto-on", "auto-off", "server", "normalize", "find",
]
COMMAND_NAMES: Tuple[str, ...] = get_args(CommandName)

_DEVICE_ID = ParameterSpec(name="deviceId", description=DEVICE_ID_DESCRIPTION)
_OPTIONAL_DEVICE_ID = ParameterSpec(name="deviceId", description=DEVICE_ID_DESCRIPTION, required=False)
_MAC_ADDRESS = ParameterSpec(name="macAddress", description=MAC_ADDRESS_DESCRIPTION)


def _build_catalog() -> Mapping[str, Operation]:
    operations = [
        Operation(name="scan", description="Scan for nearby SwitchBot devices", read_only=True),
        Operation(
            name="status",
            description="Get the status of the specified device, or of all devices",
            parameters=(_OPTIONAL_DEVICE_ID,),
            read_only=True,
        ),
        Operation(name="press", description="Press SwitchBot button device", parameters=(_DEVICE_ID,)),
        Operation(name="on", description="Turn on SwitchBot device", parameters=(_DEVICE_ID,)),
        Operation(name="off", description="Turn off SwitchBot device", parameters=(_DEVICE_ID,)),
        Operation(name="auto-on", description="Automatically turn on all scanned devices"),
        Operation(name="auto-off", description="Automatically turn off all scanned devices"),
        Operation(name="server", description="Get SwitchBot server status", read_only=True),
        Operation(
            name="normalize",
            description="Normalize MAC address format",
            parameters=(_MAC_ADDRESS,),
            read_only=True,
        ),
        Operation(
            name="find",
            description="Find device by MAC address",
            parameters=(_MAC_ADDRESS,),
            read_only=True,
        ),
        Operation(
            name="run",
            description="Execute SwitchBot command",
            parameters=(
                ParameterSpec(name="command", description="SwitchBot command", kind="command"),
                _OPTIONAL_DEVICE_ID,
            ),
            # may modify state depending on command
            read_only=False,
        ),
    ]
    return MappingProxyType({op.name: op for op in operations})


OPERATIONS: Mapping[str, Operation] = _build_catalog()


HELP_TEXT = """
# SwitchBot MCP Tool Usage Guide

## Available Tools:

1. scan - Scan for nearby SwitchBot devices
2. status [deviceId] - Get device status
3. press {deviceId} - Press device
4. on {deviceId} - Turn on device
5. off {deviceId} - Turn off device
6. auto-on - Automatically turn on all scanned devices
7. auto-off - Automatically turn off all scanned devices
8. server - Get server status
9. normalize {macAddress} - Normalize MAC address format
10. find {macAddress} - Find device by MAC address
11. run {command} [deviceId] - General execute command

## Resources:

- help://switchbot - This guide
- devices://list - Live device list (runs a fresh scan on every read)

## Usage Examples:

- Scan devices: scan
- Press a specific device: press aa:bb:cc:dd:ee:ff
- Turn on device: on aa:bb:cc:dd:ee:ff
- Turn off device: off aa:bb:cc:dd:ee:ff
- Get device status: status aa:bb:cc:dd:ee:ff
- Normalize MAC address: normalize 11:22:33:44:55:66
- Find device: find 11:22:33:44:55:66

## Notes:

- Make sure the device is powered on and within Bluetooth range
- If you encounter connection issues, try scanning devices again
- All MAC addresses are case-insensitive and will be automatically normalized
"""
