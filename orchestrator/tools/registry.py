"""Registry for tool manifests by name."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from orchestrator.tools.manifest import MANIFEST_FILENAME, ToolManifest, load_manifest
from orchestrator.tools.schema import manifest_tool_defs
from orchestrator.types.messages import ToolDef

logger = logging.getLogger(__name__)


@dataclass
class ToolRegistry:
    """Holds manifests by tool name. Populated once at startup, read-only afterwards."""

    _tools: Dict[str, ToolManifest] = field(default_factory=dict)

    def register(self, manifest: ToolManifest) -> None:
        """Register a manifest by its name, replacing any previous one."""
        if not manifest.name:
            raise ValueError("Tool name must be non-empty")
        for command_name, command in manifest.commands.items():
            unknown = command.unknown_placeholders()
            if unknown:
                logger.warning(
                    "Tool %s.%s: template placeholders %s match no declared parameter "
                    "and will be dropped when absent",
                    manifest.name,
                    command_name,
                    unknown,
                )
        self._tools[manifest.name] = manifest

    def discover(self, dirs: Iterable[str | os.PathLike]) -> int:
        """
        Scan each directory for ``<subdir>/tool.json`` manifests and register them.

        Missing or unreadable directories and unparsable manifests are skipped.
        Returns the number of manifests registered.
        """
        found = 0
        for directory in dirs:
            try:
                entries = sorted(os.scandir(directory), key=lambda e: e.name)
            except OSError:
                logger.debug("Skipping tool directory %s", directory)
                continue
            for entry in entries:
                if not entry.is_dir():
                    continue
                manifest_path = os.path.join(entry.path, MANIFEST_FILENAME)
                try:
                    manifest = load_manifest(manifest_path)
                except (OSError, ValidationError) as exc:
                    logger.debug("Skipping manifest %s: %s", manifest_path, exc)
                    continue
                self.register(manifest)
                found += 1
        return found

    def get_manifest(self, name: str) -> Optional[ToolManifest]:
        """Return the manifest with the given name, or None if not registered."""
        return self._tools.get(name)

    def list_tools(self) -> Dict[str, ToolManifest]:
        """Return a copy of the name -> manifest mapping."""
        return dict(self._tools)

    def to_tool_defs(self) -> List[ToolDef]:
        """Every command of every tool as a ToolDef, sorted by name."""
        defs: List[ToolDef] = []
        for manifest in self._tools.values():
            defs.extend(manifest_tool_defs(manifest))
        return sorted(defs, key=lambda d: d.name)

    def clear(self) -> None:
        """Remove all registered manifests."""
        self._tools.clear()


__all__ = ["ToolRegistry"]
