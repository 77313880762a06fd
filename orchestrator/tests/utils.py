"""Test utilities for the orchestrator app."""

from __future__ import annotations

import json
import os
import stat
import unittest
from pathlib import Path
from typing import Any, Dict


def require_test_apis(reason: str = "Set TEST_APIS=True in the environment to run live API tests."):
    """
    Decorator to skip a test unless TEST_APIS is set to True (case-insensitive).

    Use for tests that call real provider APIs (Anthropic, OpenAI).
    """
    test_apis = os.environ.get("TEST_APIS", "").strip().lower() == "true"
    return unittest.skipUnless(test_apis, reason)


def write_manifest(root: Path, manifest: Dict[str, Any]) -> Path:
    """Write ``<root>/<name>/tool.json`` and return its path."""
    tool_dir = root / manifest["name"]
    tool_dir.mkdir(parents=True, exist_ok=True)
    path = tool_dir / "tool.json"
    path.write_text(json.dumps(manifest), encoding="utf-8")
    return path


# Dispatches on its first argument the way real tool binaries do.
FAKE_TOOL_SCRIPT = """#!/bin/sh
cmd="$1"
shift
case "$cmd" in
  say) echo "$@" ;;
  flags) echo "$@" ;;
  write) cat ;;
  fail) echo "  something broke  " >&2; exit 3 ;;
  quiet-fail) exit 4 ;;
  nap) exec sleep "$1" ;;
esac
"""


def write_fake_tool(directory: Path) -> Path:
    """Write the executable fake tool script into ``directory`` and return its path."""
    binary = Path(directory) / "fake-tool"
    binary.write_text(FAKE_TOOL_SCRIPT, encoding="utf-8")
    binary.chmod(binary.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return binary
