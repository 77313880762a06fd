from .executor import ToolExecutor, build_command_args
from .interfaces import ToolInvoker
from .manifest import CommandDef, ParameterDef, ToolManifest, load_manifest
from .registry import ToolRegistry
from .schema import build_json_schema

__all__ = [
    "CommandDef",
    "ParameterDef",
    "ToolExecutor",
    "ToolInvoker",
    "ToolManifest",
    "ToolRegistry",
    "build_command_args",
    "build_json_schema",
    "load_manifest",
]
