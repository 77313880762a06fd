from __future__ import annotations

from typing import Optional


class OrchestratorError(Exception):
    """Base error type for all orchestrator failures."""


class ConfigurationError(OrchestratorError):
    """Misconfiguration of providers, tools, or settings."""


class MissingCredentialError(ConfigurationError):
    """A provider was asked to call its backend without a credential."""


class ProviderError(OrchestratorError):
    """Error raised from a concrete provider integration."""

    def __init__(self, message: str, *, provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider


class ProviderTransportError(ProviderError):
    """The request never produced an HTTP response (connection, timeout, read failure)."""


class ProviderHTTPError(ProviderError):
    """The backend answered with a non-success status code."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status_code: int,
        error_type: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.error_type = error_type
        self.error_message = error_message


class ProviderAPIError(ProviderError):
    """The backend answered successfully but the body carries an error object."""

    def __init__(self, message: str, *, provider: str = "", error_type: str = "", error_message: str = "") -> None:
        super().__init__(message, provider=provider)
        self.error_type = error_type
        self.error_message = error_message


class ToolError(OrchestratorError):
    """Base error for tool resolution and execution."""


class InvalidToolNameError(ToolError):
    """Tool call name is not of the form ``tool.command``."""


class UnknownToolError(ToolError):
    """No manifest is registered under the requested tool name."""


class UnknownCommandError(ToolError):
    """The tool exists but does not declare the requested command."""


class ToolArgumentsError(ToolError):
    """Tool call arguments are not a JSON object."""


class ToolExecutionError(ToolError):
    """The tool subprocess could not be started or exited unsuccessfully."""


class ToolTimeoutError(ToolExecutionError):
    """The tool subprocess exceeded its timeout and was killed."""


class TranscriptError(OrchestratorError):
    """A message would break tool-call correlation in the transcript."""


__all__ = [
    "OrchestratorError",
    "ConfigurationError",
    "MissingCredentialError",
    "ProviderError",
    "ProviderTransportError",
    "ProviderHTTPError",
    "ProviderAPIError",
    "ToolError",
    "InvalidToolNameError",
    "UnknownToolError",
    "UnknownCommandError",
    "ToolArgumentsError",
    "ToolExecutionError",
    "ToolTimeoutError",
    "TranscriptError",
]
