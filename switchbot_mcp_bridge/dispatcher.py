"""
Validate tool invocations against the operation catalog and hand them to the
process runner.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .catalog import COMMAND_NAMES, OPERATIONS, Operation
from .runner import ExecutionResult, format_result, run_switchbot_command

logger = logging.getLogger("switchbot_mcp.dispatcher")

Runner = Callable[[str, Sequence[str]], ExecutionResult]


class DispatchError(Exception):
    """Base class for requests rejected before any process is spawned."""


class UnknownOperation(DispatchError):
    def __init__(self, name: str):
        super().__init__(f"Unknown operation: {name}")
        self.name = name


class ValidationError(DispatchError, ValueError):
    pass


class Dispatcher:
    """Map operation names plus parameters onto CLI invocations."""

    def __init__(
        self,
        operations: Mapping[str, Operation] = OPERATIONS,
        runner: Optional[Runner] = None,
    ):
        self.operations = operations
        self.runner = runner or run_switchbot_command

    def operation(self, name: str) -> Operation:
        try:
            return self.operations[name]
        except KeyError:
            raise UnknownOperation(name) from None

    def build_args(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Tuple[str, List[str]]:
        """Validate `params` for operation `name` and return (command, args)."""
        op = self.operation(name)
        args = self._positional_args(op, dict(params or {}))

        if op.parameters and op.parameters[0].kind == "command":
            return self._redispatch(args[0], args[1:])

        return name, args

    def _redispatch(self, command: str, rest: List[str]) -> Tuple[str, List[str]]:
        target = self.operation(command)
        target_params: Dict[str, Any] = {}
        if rest:
            if not target.parameters:
                raise ValidationError(f"Command '{command}' does not take a device ID")
            # deviceId stands in for whatever the target calls its argument
            target_params[target.parameters[0].name] = rest[0]
        return command, self._positional_args(target, target_params)

    def _reject_unknown(self, op: Operation, params: Mapping[str, Any]) -> None:
        unknown = [key for key in params if op.parameter(key) is None]
        if unknown:
            raise ValidationError(f"Unexpected parameter(s) for '{op.name}': {', '.join(sorted(unknown))}")

    def _positional_args(self, op: Operation, params: Mapping[str, Any]) -> List[str]:
        self._reject_unknown(op, params)
        args: List[str] = []
        for spec in op.parameters:
            value = params.get(spec.name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"Parameter '{spec.name}' must be a string")
            if value is None or not value.strip():
                if spec.required:
                    raise ValidationError(f"Missing required parameter '{spec.name}' for '{op.name}'")
                continue
            if spec.kind == "command" and value not in COMMAND_NAMES:
                raise ValidationError(
                    f"Invalid command {value!r}; expected one of: {', '.join(COMMAND_NAMES)}"
                )
            args.append(value)
        return args

    def execute(self, name: str, params: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
        command, args = self.build_args(name, params)
        logger.info(f"Dispatching '{name}' -> {command} {' '.join(args)}".rstrip())
        return self.runner(command, args)

    def invoke(self, name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Run an operation and return the text for the caller.

        Raises UnknownOperation or ValidationError before spawning anything;
        a failing CLI comes back as text starting with "Error: ".
        """
        return format_result(self.execute(name, params))
