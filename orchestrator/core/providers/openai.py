from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from orchestrator.core.providers.base import BaseHTTPProvider, error_object
from orchestrator.core.registry import get_provider_registry
from orchestrator.types.messages import Message, ToolCall
from orchestrator.types.requests import ChatRequest
from orchestrator.types.responses import ChatResponse, Usage

OPENAI_BASE_URL = "https://api.openai.com/v1"
_COMPLETIONS_PATH = "/chat/completions"


class OpenAIProvider(BaseHTTPProvider):
    """Flat-message protocol (OpenAI Chat Completions).

    Works with OpenAI and any compatible endpoint (Groq, Together, Ollama...)
    by pointing ``base_url`` at it.
    """

    name = "openai"
    api_key_env = "OPENAI_API_KEY"
    default_model = "gpt-4o"

    @property
    def endpoint(self) -> str:
        base = (self.base_url or OPENAI_BASE_URL).rstrip("/")
        if base.endswith(_COMPLETIONS_PATH):
            return base
        return base + _COMPLETIONS_PATH

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def build_payload(self, request: ChatRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model or self.model,
            "messages": [self._wire_message(m) for m in request.messages],
        }
        if request.tools:
            payload["tools"] = [
                {
                    "type": "function",
                    "function": {
                        "name": t.name,
                        "description": t.description,
                        "parameters": t.parameters,
                    },
                }
                for t in request.tools
            ]
        if request.max_tokens:
            payload["max_tokens"] = request.max_tokens
        return payload

    @staticmethod
    def _wire_message(message: Message) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"role": message.role}
        # Assistant turns that only carry tool calls omit content.
        if message.content or not (message.role == "assistant" and message.tool_calls):
            entry["content"] = message.content
        if message.tool_calls:
            entry["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": tc.arguments},
                }
                for tc in message.tool_calls
            ]
        if message.role == "tool":
            entry["tool_call_id"] = message.tool_call_id
        return entry

    def parse_response(self, body: Dict[str, Any]) -> ChatResponse:
        usage_raw = body.get("usage") or {}
        usage = Usage(
            prompt_tokens=usage_raw.get("prompt_tokens") or 0,
            completion_tokens=usage_raw.get("completion_tokens") or 0,
        )
        choices = body.get("choices") or []
        if not choices:
            return ChatResponse(usage=usage, model=body.get("model"), raw=body)

        choice = choices[0] or {}
        message = choice.get("message") or {}
        tool_calls: List[ToolCall] = []
        for tc in message.get("tool_calls") or []:
            function = tc.get("function") or {}
            arguments = function.get("arguments")
            if not isinstance(arguments, str):
                # Some compatible backends return a decoded object.
                arguments = json.dumps(arguments if arguments is not None else {})
            tool_calls.append(ToolCall(
                id=tc.get("id") or "",
                name=function.get("name") or "",
                arguments=arguments,
            ))

        return ChatResponse(
            content=message.get("content") or "",
            tool_calls=tool_calls,
            usage=usage,
            model=body.get("model"),
            stop_reason=choice.get("finish_reason"),
            raw=body,
        )

    def _error_from_body(self, body: Dict[str, Any]) -> Optional[Tuple[str, str]]:
        return error_object(body)


# Register default names for OpenAI-compatible backends.
_registry = get_provider_registry()
_registry.register_provider("openai", OpenAIProvider.from_config)
_registry.register_provider("gpt", OpenAIProvider.from_config)


__all__ = ["OpenAIProvider", "OPENAI_BASE_URL"]
