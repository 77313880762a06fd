"""tool.json manifest format.

A manifest names a binary and the commands it understands. Each command
either expands a whitespace-separated ``args`` template or, when no template
is given, passes every argument as ``--key value``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

MANIFEST_FILENAME = "tool.json"
DEFAULT_STDIN_PARAM = "content"

_PLACEHOLDER_NAME_RE = re.compile(r"\{([^{}\s]+)\}")


class ParameterDef(BaseModel):
    type: str = "string"
    description: str = ""
    required: bool = False
    default: Any = None


class CommandDef(BaseModel):
    description: str = ""
    args: str = ""  # template, e.g. "--namespace {namespace}"
    stdin: bool = False
    stdin_param: str = ""
    parameters: Dict[str, ParameterDef] = Field(default_factory=dict)

    @property
    def stdin_parameter(self) -> Optional[str]:
        """Name of the argument piped to standard input, if the command takes one."""
        if not (self.stdin or self.stdin_param):
            return None
        return self.stdin_param or DEFAULT_STDIN_PARAM

    def placeholders(self) -> List[str]:
        return _PLACEHOLDER_NAME_RE.findall(self.args)

    def unknown_placeholders(self) -> List[str]:
        """Template placeholders that match no declared parameter."""
        return [p for p in self.placeholders() if p not in self.parameters]


class ToolManifest(BaseModel):
    name: str
    binary: str
    description: str = ""
    commands: Dict[str, CommandDef] = Field(default_factory=dict)


def load_manifest(path: str | Path) -> ToolManifest:
    """Read and validate one manifest file. Raises OSError or pydantic.ValidationError."""
    return ToolManifest.model_validate_json(Path(path).read_text(encoding="utf-8"))


__all__ = [
    "MANIFEST_FILENAME",
    "DEFAULT_STDIN_PARAM",
    "ParameterDef",
    "CommandDef",
    "ToolManifest",
    "load_manifest",
]
