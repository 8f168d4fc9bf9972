import asyncio
import sys
import textwrap

import pytest

from switchbot_mcp_bridge.catalog import OPERATIONS
from switchbot_mcp_bridge.config import Settings
from switchbot_mcp_bridge.dispatcher import Dispatcher
from switchbot_mcp_bridge.runner import ExecutionResult
from switchbot_mcp_bridge.server import create_server


class FakeRunner:
    """Records every CLI invocation instead of spawning a process."""

    def __init__(self, output="ok"):
        self.calls = []
        self.results = []
        self.output = output

    def queue(self, *results):
        self.results.extend(results)

    def __call__(self, command, args=()):
        self.calls.append([command, *args])
        if self.results:
            return self.results.pop(0)
        return ExecutionResult(success=True, output=self.output, exit_code=0)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def dispatcher(fake_runner):
    return Dispatcher(OPERATIONS, runner=fake_runner)


@pytest.fixture
def mcp(dispatcher):
    return create_server(dispatcher)


@pytest.fixture
def run():
    """Run a coroutine to completion from a synchronous test."""
    return asyncio.run


FAKE_CLI = textwrap.dedent(
    """
    import sys
    import time

    command, args = sys.argv[1], sys.argv[2:]
    if command == "fail":
        print("partial output")
        print("timeout", file=sys.stderr)
        sys.exit(1)
    if command == "silent-fail":
        sys.exit(3)
    if command == "garbled" or "garbled" in args:
        sys.stdout.buffer.write(b"Device ID: aa \\xff name\\n")
        sys.exit(0)
    if command == "hang":
        print("started", flush=True)
        time.sleep(30)
    print("  ran", command, *args, "  ")
    """
)


@pytest.fixture
def cli_settings(tmp_path):
    """Settings that run a throwaway Python script in place of bot-cmd.mjs."""
    script = tmp_path / "bot-cmd.py"
    script.write_text(FAKE_CLI)
    return Settings(interpreter=sys.executable, cli_path=str(script))
