"""Run tool calls as subprocesses described by their manifests."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from orchestrator.service.errors import (
    InvalidToolNameError,
    ToolArgumentsError,
    ToolExecutionError,
    ToolTimeoutError,
    UnknownCommandError,
    UnknownToolError,
)
from orchestrator.tools.interfaces import ToolInvoker
from orchestrator.tools.manifest import CommandDef, ToolManifest
from orchestrator.tools.registry import ToolRegistry
from orchestrator.types.messages import ToolCall

logger = logging.getLogger(__name__)

DEFAULT_TOOL_TIMEOUT = 30.0


def format_argument(value: Any) -> str:
    """Textual form of a decoded JSON argument as it appears on a command line."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"))


def parse_arguments(arguments: str) -> Dict[str, Any]:
    """Decode tool call arguments; blank text and ``null`` mean no arguments."""
    if not arguments or not arguments.strip():
        return {}
    try:
        args = json.loads(arguments)
    except ValueError as exc:
        raise ToolArgumentsError(f"parse tool arguments: {exc}") from exc
    if args is None:
        return {}
    if not isinstance(args, dict):
        raise ToolArgumentsError(
            f"parse tool arguments: expected a JSON object, got {type(args).__name__}"
        )
    return args


def build_command_args(command_name: str, command: CommandDef, args: Dict[str, Any]) -> List[str]:
    """
    Build the argument vector passed after the binary.

    Template mode substitutes ``{param}`` occurrences and drops any token that
    still holds a placeholder (an absent optional argument). Flag
    mode emits ``--key value`` for each argument except the stdin parameter.
    The command name always comes first.
    """
    argv = [command_name]

    if command.args:
        expanded = command.args
        for key, value in args.items():
            expanded = expanded.replace("{" + key + "}", format_argument(value))
        absent = ["{" + p + "}" for p in command.placeholders() if p not in args]
        argv.extend(part for part in expanded.split() if not any(a in part for a in absent))
        return argv

    stdin_param = command.stdin_parameter
    for key, value in args.items():
        if key == stdin_param:
            continue
        argv.extend([f"--{key}", format_argument(value)])
    return argv


class ToolExecutor(ToolInvoker):
    """Dispatch ``tool.command`` calls to the binaries declared in the registry.

    Holds no per-call state; one instance can serve concurrent loop runs.
    """

    def __init__(self, registry: ToolRegistry, timeout: float | None = DEFAULT_TOOL_TIMEOUT) -> None:
        self.registry = registry
        self.timeout = timeout or DEFAULT_TOOL_TIMEOUT

    def resolve(self, name: str) -> Tuple[ToolManifest, str, CommandDef]:
        parts = name.split(".", 1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidToolNameError(f"invalid tool name: {name} (expected tool.command)")
        tool_name, command_name = parts

        manifest = self.registry.get_manifest(tool_name)
        if manifest is None:
            raise UnknownToolError(f"unknown tool: {tool_name}")
        command = manifest.commands.get(command_name)
        if command is None:
            raise UnknownCommandError(f"unknown command: {tool_name}.{command_name}")
        return manifest, command_name, command

    async def execute(self, call: ToolCall) -> str:
        manifest, command_name, command = self.resolve(call.name)
        args = parse_arguments(call.arguments)
        argv = build_command_args(command_name, command, args)

        stdin_data: Optional[bytes] = None
        stdin_param = command.stdin_parameter
        if stdin_param and stdin_param in args:
            stdin_data = format_argument(args[stdin_param]).encode("utf-8")

        return await self._run(f"{manifest.name}.{command_name}", manifest.binary, argv, stdin_data)

    async def _run(self, label: str, binary: str, argv: List[str], stdin_data: Optional[bytes]) -> str:
        logger.debug("Running %s: %s %s", label, binary, argv)
        try:
            proc = await asyncio.create_subprocess_exec(
                binary,
                *argv,
                stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ToolExecutionError(f"{label} failed: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(stdin_data), timeout=self.timeout)
        except asyncio.TimeoutError:
            await _terminate(proc)
            raise ToolTimeoutError(f"{label} timed out after {self.timeout:g}s") from None
        except asyncio.CancelledError:
            await _terminate(proc)
            raise

        if proc.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            if not message:
                message = f"exit status {proc.returncode}"
            raise ToolExecutionError(f"{label} failed: {message}")

        return stdout.decode("utf-8", errors="replace")


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()


__all__ = [
    "DEFAULT_TOOL_TIMEOUT",
    "ToolExecutor",
    "build_command_args",
    "format_argument",
    "parse_arguments",
]
