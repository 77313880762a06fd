"""Convert tool manifests to ToolDefs advertised to the model."""

from __future__ import annotations

from typing import Any, Dict, List

from orchestrator.tools.manifest import ParameterDef, ToolManifest
from orchestrator.types.messages import ToolDef


def build_json_schema(parameters: Dict[str, ParameterDef]) -> Dict[str, Any]:
    """Build an object JSON schema from declared command parameters."""
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name in sorted(parameters):
        param = parameters[name]
        prop: Dict[str, Any] = {"type": param.type, "description": param.description}
        if param.default is not None:
            prop["default"] = param.default
        properties[name] = prop
        if param.required:
            required.append(name)

    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def manifest_tool_defs(manifest: ToolManifest) -> List[ToolDef]:
    """One ToolDef per command, named ``tool.command``."""
    return [
        ToolDef(
            name=f"{manifest.name}.{command_name}",
            description=f"[{manifest.name}] {command.description}",
            parameters=build_json_schema(command.parameters),
        )
        for command_name, command in manifest.commands.items()
    ]


__all__ = ["build_json_schema", "manifest_tool_defs"]
