"""
Run the SwitchBot device-control CLI and capture what it prints.

Every call spawns exactly one process and blocks until it exits. Arguments
are passed as an argument vector, never through a shell, so a device id
cannot inject extra shell commands.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import Settings

logger = logging.getLogger("switchbot_mcp.runner")


@dataclass
class ExecutionResult:
    """Outcome of one CLI invocation."""

    success: bool
    output: str = ""
    error: Optional[str] = None
    exit_code: Optional[int] = None


def build_command_line(command: str, args: Sequence[str], settings: Settings) -> List[str]:
    """Return the argv for `<interpreter> <cli-path> <command> [args...]`."""
    return [settings.interpreter, settings.cli_path, command, *args]


def _as_text(value) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def run_switchbot_command(
    command: str,
    args: Sequence[str] = (),
    settings: Optional[Settings] = None,
) -> ExecutionResult:
    """Execute a SwitchBot CLI command synchronously.

    Never raises for process-level problems: a non-zero exit, a missing
    executable or a timeout all come back as a failed ExecutionResult.
    Bytes that are not valid UTF-8 are replaced rather than rejected.
    """
    settings = settings or Settings.from_env()
    argv = build_command_line(command, args, settings)
    logger.info(f"Executing SwitchBot command: {' '.join(argv)}")

    try:
        proc = subprocess.run(
            argv,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=settings.timeout,
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"SwitchBot command timed out after {settings.timeout}s: {command}")
        return ExecutionResult(
            success=False,
            output=_as_text(e.stdout).strip(),
            error=f"Command timed out after {settings.timeout:g}s",
        )
    except OSError as e:
        logger.error(f"Failed to execute SwitchBot command: {e}")
        return ExecutionResult(success=False, error=str(e))

    if proc.returncode != 0:
        error = proc.stderr.strip() or f"Command exited with status {proc.returncode}"
        logger.error(f"SwitchBot command failed ({proc.returncode}): {error}")
        return ExecutionResult(
            success=False,
            output=proc.stdout.strip(),
            error=error,
            exit_code=proc.returncode,
        )

    logger.debug(f"SwitchBot command output: {proc.stdout[:200]}")
    return ExecutionResult(success=True, output=proc.stdout.strip(), exit_code=0)


def format_result(result: ExecutionResult) -> str:
    """Render a result as the text handed back to the caller."""
    if result.success:
        return result.output
    return f"Error: {result.error}"
