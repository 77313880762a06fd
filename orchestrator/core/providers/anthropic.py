from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from orchestrator.core.providers.base import BaseHTTPProvider, error_object
from orchestrator.core.registry import get_provider_registry
from orchestrator.types.messages import Message, ToolCall
from orchestrator.types.requests import ChatRequest
from orchestrator.types.responses import ChatResponse, Usage

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 4096


def _decode_arguments(arguments: str) -> Any:
    """Parse tool call arguments for a tool_use block; invalid JSON degrades to None."""
    try:
        return json.loads(arguments)
    except (TypeError, ValueError):
        return None


class AnthropicProvider(BaseHTTPProvider):
    """Content-block protocol (Anthropic Messages API).

    The system prompt travels in the top-level ``system`` field; when a
    request carries several system messages only the last one is sent.
    """

    name = "anthropic"
    api_key_env = "ANTHROPIC_API_KEY"
    default_model = "claude-sonnet-4-20250514"

    @property
    def endpoint(self) -> str:
        return self.base_url or ANTHROPIC_API_URL

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def build_payload(self, request: ChatRequest) -> Dict[str, Any]:
        system = ""
        messages: List[Dict[str, Any]] = []
        for m in request.messages:
            if m.role == "system":
                system = m.content
            elif m.role == "user":
                messages.append({"role": "user", "content": m.content})
            elif m.role == "assistant":
                messages.append(self._assistant_message(m))
            elif m.role == "tool":
                messages.append({
                    "role": "user",
                    "content": [{
                        "type": "tool_result",
                        "tool_use_id": m.tool_call_id,
                        "content": m.content,
                    }],
                })

        payload: Dict[str, Any] = {
            "model": request.model or self.model,
            "max_tokens": request.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": messages,
        }
        if system:
            payload["system"] = system
        if request.tools:
            payload["tools"] = [
                {"name": t.name, "description": t.description, "input_schema": t.parameters}
                for t in request.tools
            ]
        return payload

    @staticmethod
    def _assistant_message(message: Message) -> Dict[str, Any]:
        if not message.tool_calls:
            return {"role": "assistant", "content": message.content}
        blocks: List[Dict[str, Any]] = []
        if message.content:
            blocks.append({"type": "text", "text": message.content})
        for tc in message.tool_calls:
            blocks.append({
                "type": "tool_use",
                "id": tc.id,
                "name": tc.name,
                "input": _decode_arguments(tc.arguments),
            })
        return {"role": "assistant", "content": blocks}

    def parse_response(self, body: Dict[str, Any]) -> ChatResponse:
        text_parts: List[str] = []
        tool_calls: List[ToolCall] = []
        for block in body.get("content") or []:
            if not isinstance(block, dict):
                continue
            block_type = block.get("type")
            if block_type == "text":
                text_parts.append(block.get("text") or "")
            elif block_type == "tool_use":
                tool_input = block.get("input")
                tool_calls.append(ToolCall(
                    id=block.get("id") or "",
                    name=block.get("name") or "",
                    arguments=json.dumps(tool_input if tool_input is not None else {}),
                ))

        usage = body.get("usage") or {}
        return ChatResponse(
            content="".join(text_parts),
            tool_calls=tool_calls,
            usage=Usage(
                prompt_tokens=usage.get("input_tokens") or 0,
                completion_tokens=usage.get("output_tokens") or 0,
            ),
            model=body.get("model"),
            stop_reason=body.get("stop_reason"),
            raw=body,
        )

    def _error_from_body(self, body: Dict[str, Any]) -> Optional[Tuple[str, str]]:
        if not isinstance(body, dict) or body.get("type") != "error":
            return None
        return error_object(body)


_registry = get_provider_registry()
_registry.register_provider("anthropic", AnthropicProvider.from_config)
_registry.register_provider("claude", AnthropicProvider.from_config)


__all__ = ["AnthropicProvider", "ANTHROPIC_API_URL", "ANTHROPIC_VERSION"]
