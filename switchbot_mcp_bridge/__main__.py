#!/usr/bin/env python3
"""
Direct runner for the SwitchBot MCP server: python -m switchbot_mcp_bridge
"""

from .server import main

if __name__ == "__main__":
    raise SystemExit(main())
