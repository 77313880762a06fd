from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from orchestrator.core.interfaces import ChatProvider
from orchestrator.service.errors import ConfigurationError


@dataclass(frozen=True)
class ProviderConfig:
    """Everything needed to build one provider instance."""

    name: str
    api_key: Optional[str] = None  # None falls back to the provider's environment variable
    model: Optional[str] = None
    base_url: Optional[str] = None  # custom endpoint for wire-compatible backends
    timeout: float = 120.0


ProviderFactory = Callable[[ProviderConfig], ChatProvider]


@dataclass
class ProviderRegistry:
    """
    Registry mapping provider names (e.g. "anthropic", "openai") to factories.

    A factory receives the full ProviderConfig and returns an initialized
    ChatProvider.
    """

    _factories: Dict[str, ProviderFactory] = field(default_factory=dict)

    def register_provider(self, name: str, factory: ProviderFactory) -> None:
        """Register a factory under the given provider name."""

        if not name:
            raise ValueError("provider name must be non-empty")
        self._factories[name.lower()] = factory

    def create(self, config: ProviderConfig) -> ChatProvider:
        """
        Build a ChatProvider for ``config.name``.

        Raises ConfigurationError if no factory is registered under that name.
        """

        factory = self._factories.get((config.name or "").lower())
        if factory is None:
            available: List[str] = sorted(self._factories)
            raise ConfigurationError(
                f"Unknown provider: {config.name!r}. "
                f"Supported: {', '.join(available) or '[]'}"
            )
        return factory(config)

    def names(self) -> List[str]:
        return sorted(self._factories)

    def clear(self) -> None:
        """Remove all registered factories."""
        self._factories.clear()


_global_registry: ProviderRegistry | None = None
_global_registry_lock = threading.Lock()


def get_provider_registry() -> ProviderRegistry:
    """Return the process-wide ProviderRegistry singleton (thread-safe)."""

    global _global_registry
    if _global_registry is None:
        with _global_registry_lock:
            if _global_registry is None:
                _global_registry = ProviderRegistry()
    return _global_registry


def create_provider(config: ProviderConfig) -> ChatProvider:
    """Build a provider from the process-wide registry, loading built-in providers first."""

    import orchestrator.core.providers  # noqa: F401

    return get_provider_registry().create(config)


__all__ = ["ProviderConfig", "ProviderRegistry", "get_provider_registry", "create_provider"]
