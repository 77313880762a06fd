"""
Provider-specific ChatProvider implementations.

Importing this package registers every built-in provider name with the
process-wide ProviderRegistry.
"""

from .base import BaseHTTPProvider  # noqa: F401
from .anthropic import AnthropicProvider  # noqa: F401
from .openai import OpenAIProvider  # noqa: F401

__all__ = ["BaseHTTPProvider", "AnthropicProvider", "OpenAIProvider"]
