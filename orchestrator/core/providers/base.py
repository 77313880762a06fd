"""Base class for HTTP-backed ChatProvider implementations.

Encapsulates credential checks, the POST round trip and error classification
so provider subclasses only need to translate payloads.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import httpx

from orchestrator.core.interfaces import ChatProvider
from orchestrator.service.errors import (
    MissingCredentialError,
    ProviderAPIError,
    ProviderError,
    ProviderHTTPError,
    ProviderTransportError,
)
from orchestrator.types.requests import ChatRequest
from orchestrator.types.responses import ChatResponse

if TYPE_CHECKING:
    from orchestrator.core.registry import ProviderConfig

DEFAULT_REQUEST_TIMEOUT = 120.0


class BaseHTTPProvider(ChatProvider):
    """Shared request/response plumbing for JSON-over-HTTP providers.

    Subclasses set ``name``, ``api_key_env`` and ``default_model`` and
    implement ``endpoint``, ``_headers``, ``build_payload``, ``parse_response``
    and ``_error_from_body``.
    """

    name: str
    api_key_env: str
    default_model: str

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if api_key is None:
            api_key = os.getenv(self.api_key_env, "")
        self._api_key = api_key or ""
        self.model = model or self.default_model
        self.base_url = base_url or ""
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: "ProviderConfig") -> "BaseHTTPProvider":
        return cls(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    def endpoint(self) -> str:
        raise NotImplementedError

    def _headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def build_payload(self, request: ChatRequest) -> Dict[str, Any]:
        raise NotImplementedError

    def parse_response(self, body: Dict[str, Any]) -> ChatResponse:
        raise NotImplementedError

    def _error_from_body(self, body: Dict[str, Any]) -> Optional[Tuple[str, str]]:
        """Return (error_type, message) when the decoded body reports an error."""
        raise NotImplementedError

    async def chat(self, request: ChatRequest) -> ChatResponse:
        if not self._api_key:
            raise MissingCredentialError(f"{self.name}: {self.api_key_env} not set")

        body = await self._post(self.build_payload(request))

        error = self._error_from_body(body)
        if error is not None:
            error_type, message = error
            raise ProviderAPIError(
                f"{self.name}: API error: {error_type}: {message}",
                provider=self.name,
                error_type=error_type,
                error_message=message,
            )
        return self.parse_response(body)

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            raise ProviderTransportError(
                f"{self.name}: request failed: {exc}", provider=self.name
            ) from exc

        if not response.is_success:
            error_type = error_message = None
            try:
                error = self._error_from_body(response.json())
            except ValueError:
                error = None
            if error is not None:
                error_type, error_message = error
            raise ProviderHTTPError(
                f"{self.name}: HTTP {response.status_code}: {error_message or response.text}",
                provider=self.name,
                status_code=response.status_code,
                error_type=error_type,
                error_message=error_message,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(f"{self.name}: unmarshal response: {exc}", provider=self.name) from exc
        if not isinstance(body, dict):
            raise ProviderError(
                f"{self.name}: unexpected response body of type {type(body).__name__}",
                provider=self.name,
            )
        return body


def error_object(body: Any) -> Optional[Tuple[str, str]]:
    """Extract ``{"error": {"type", "message"}}`` from a decoded body, if present."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if not error:
        return None
    if isinstance(error, dict):
        return str(error.get("type") or ""), str(error.get("message") or "")
    return "", str(error)


__all__ = ["BaseHTTPProvider", "DEFAULT_REQUEST_TIMEOUT", "error_object"]
