"""
Orchestrator configuration from Django settings.
"""
from pathlib import Path

from django.conf import settings


def get_provider_name() -> str:
    return getattr(settings, "ORCHESTRATOR_PROVIDER", "anthropic")


def get_model() -> str | None:
    """Model override; None means the provider default."""
    return getattr(settings, "ORCHESTRATOR_MODEL", "") or None


def get_api_key() -> str | None:
    """Explicit credential; None lets the provider read its own environment variable."""
    return getattr(settings, "ORCHESTRATOR_API_KEY", "") or None


def get_base_url() -> str | None:
    return getattr(settings, "ORCHESTRATOR_BASE_URL", "") or None


def get_max_tokens() -> int:
    return int(getattr(settings, "ORCHESTRATOR_MAX_TOKENS", 4096))


def get_request_timeout() -> float:
    """Provider request timeout in seconds."""
    return float(getattr(settings, "ORCHESTRATOR_REQUEST_TIMEOUT", 120.0))


def get_max_iterations() -> int:
    return int(getattr(settings, "ORCHESTRATOR_MAX_ITERATIONS", 20))


def get_default_session_key() -> str:
    return getattr(settings, "ORCHESTRATOR_SESSION_KEY", "main")


def get_session_dir() -> Path:
    return Path(getattr(settings, "ORCHESTRATOR_SESSION_DIR", Path.home() / ".teeny-orchestrator" / "sessions"))


def get_workspace() -> Path:
    return Path(getattr(settings, "ORCHESTRATOR_WORKSPACE", Path.cwd()))


def get_tool_dirs() -> list[str]:
    return list(getattr(settings, "ORCHESTRATOR_TOOL_DIRS", []))


def get_tool_timeout() -> float:
    """Per-tool subprocess timeout in seconds."""
    return float(getattr(settings, "ORCHESTRATOR_TOOL_TIMEOUT", 30.0))


def get_auto_capture() -> bool:
    return bool(getattr(settings, "ORCHESTRATOR_AUTO_CAPTURE", True))


# "token-eval" forwards to the external binary, "call-log" writes ModelCallLog rows.
CAPTURE_BACKENDS = ("token-eval", "call-log", "none")


def get_capture_backend() -> str:
    return getattr(settings, "ORCHESTRATOR_CAPTURE_BACKEND", "token-eval")


def get_eval_binary() -> str:
    return getattr(settings, "ORCHESTRATOR_EVAL_BINARY", "token-eval")
