"""Tests for the OpenAI-compatible flat-message provider."""

import json

import httpx
from django.test import SimpleTestCase

from orchestrator.core.providers.openai import OPENAI_BASE_URL, OpenAIProvider
from orchestrator.service.errors import (
    MissingCredentialError,
    ProviderAPIError,
    ProviderHTTPError,
    ProviderTransportError,
)
from orchestrator.types.messages import Message, ToolCall, ToolDef
from orchestrator.types.requests import ChatRequest


def _completion(message, finish_reason="stop"):
    return {
        "id": "chatcmpl-1",
        "model": "gpt-4o",
        "choices": [{"index": 0, "message": message, "finish_reason": finish_reason}],
        "usage": {"prompt_tokens": 20, "completion_tokens": 7, "total_tokens": 27},
    }


def _mock(status=200, body=None, requests=None):
    def handler(request):
        if requests is not None:
            requests.append(request)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def _user(text="hi"):
    return ChatRequest(messages=[Message(role="user", content=text)])


class OpenAIPayloadTests(SimpleTestCase):

    def test_messages_are_flat_and_tool_calls_carry_raw_arguments(self):
        provider = OpenAIProvider(api_key="k")
        payload = provider.build_payload(ChatRequest(
            messages=[
                Message(role="system", content="sys"),
                Message(role="user", content="list pods"),
                Message(
                    role="assistant",
                    tool_calls=[ToolCall(id="call_1", name="kubectl.get", arguments='{"resource":"pods"}')],
                ),
                Message(role="tool", content="pod-a", tool_call_id="call_1"),
            ],
            tools=[ToolDef(name="kubectl.get", description="d", parameters={"type": "object"})],
        ))
        messages = payload["messages"]
        self.assertEqual(messages[0], {"role": "system", "content": "sys"})
        self.assertEqual(messages[1], {"role": "user", "content": "list pods"})
        self.assertEqual(messages[2], {
            "role": "assistant",
            "tool_calls": [{
                "id": "call_1",
                "type": "function",
                "function": {"name": "kubectl.get", "arguments": '{"resource":"pods"}'},
            }],
        })
        self.assertEqual(messages[3], {"role": "tool", "content": "pod-a", "tool_call_id": "call_1"})
        self.assertEqual(payload["tools"], [{
            "type": "function",
            "function": {"name": "kubectl.get", "description": "d", "parameters": {"type": "object"}},
        }])

    def test_assistant_text_with_tool_calls_keeps_content(self):
        provider = OpenAIProvider(api_key="k")
        payload = provider.build_payload(ChatRequest(messages=[
            Message(role="assistant", content="Checking.", tool_calls=[ToolCall(id="c", name="a.b")]),
        ]))
        self.assertEqual(payload["messages"][0]["content"], "Checking.")

    def test_max_tokens_only_when_set(self):
        provider = OpenAIProvider(api_key="k")
        self.assertNotIn("max_tokens", provider.build_payload(_user()))
        self.assertNotIn("tools", provider.build_payload(_user()))
        payload = provider.build_payload(ChatRequest(
            messages=[Message(role="user", content="hi")], max_tokens=50, model="gpt-4o-mini",
        ))
        self.assertEqual(payload["max_tokens"], 50)
        self.assertEqual(payload["model"], "gpt-4o-mini")

    def test_endpoint_from_base_url(self):
        self.assertEqual(OpenAIProvider(api_key="k").endpoint, OPENAI_BASE_URL + "/chat/completions")
        self.assertEqual(
            OpenAIProvider(api_key="k", base_url="http://localhost:11434/v1/").endpoint,
            "http://localhost:11434/v1/chat/completions",
        )
        self.assertEqual(
            OpenAIProvider(api_key="k", base_url="https://api.groq.com/openai/v1/chat/completions").endpoint,
            "https://api.groq.com/openai/v1/chat/completions",
        )


class OpenAIChatTests(SimpleTestCase):

    async def test_missing_credential_makes_no_request(self):
        requests = []
        provider = OpenAIProvider(api_key="", transport=_mock(body={}, requests=requests))
        with self.assertRaises(MissingCredentialError):
            await provider.chat(_user())
        self.assertEqual(requests, [])

    async def test_parses_text_response(self):
        requests = []
        body = _completion({"role": "assistant", "content": "Hello!"})
        provider = OpenAIProvider(api_key="sk-test", transport=_mock(body=body, requests=requests))
        response = await provider.chat(_user())

        self.assertEqual(requests[0].headers["authorization"], "Bearer sk-test")
        self.assertEqual(json.loads(requests[0].content)["messages"], [{"role": "user", "content": "hi"}])
        self.assertEqual(response.content, "Hello!")
        self.assertEqual(response.usage.prompt_tokens, 20)
        self.assertEqual(response.usage.completion_tokens, 7)
        self.assertEqual(response.stop_reason, "stop")

    async def test_parses_tool_calls_and_null_content(self):
        body = _completion(
            {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {"id": "call_1", "type": "function",
                     "function": {"name": "kubectl.get", "arguments": '{"resource":"pods"}'}},
                    {"id": "call_2", "type": "function",
                     "function": {"name": "todo.list", "arguments": {"status": "open"}}},
                ],
            },
            finish_reason="tool_calls",
        )
        provider = OpenAIProvider(api_key="k", transport=_mock(body=body))
        response = await provider.chat(_user())

        self.assertEqual(response.content, "")
        self.assertEqual([tc.id for tc in response.tool_calls], ["call_1", "call_2"])
        self.assertEqual(response.tool_calls[0].arguments, '{"resource":"pods"}')
        self.assertEqual(json.loads(response.tool_calls[1].arguments), {"status": "open"})

    async def test_empty_choices_returns_empty_response_with_usage(self):
        body = {"model": "gpt-4o", "choices": [], "usage": {"prompt_tokens": 3, "completion_tokens": 0}}
        provider = OpenAIProvider(api_key="k", transport=_mock(body=body))
        response = await provider.chat(_user())
        self.assertEqual(response.content, "")
        self.assertEqual(response.tool_calls, [])
        self.assertEqual(response.usage.prompt_tokens, 3)

    async def test_http_error(self):
        body = {"error": {"type": "invalid_api_key", "message": "Incorrect API key provided"}}
        provider = OpenAIProvider(api_key="k", transport=_mock(status=401, body=body))
        with self.assertRaises(ProviderHTTPError) as ctx:
            await provider.chat(_user())
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.error_type, "invalid_api_key")
        self.assertIn("Incorrect API key", str(ctx.exception))

    async def test_error_object_with_success_status(self):
        body = {"error": {"type": "server_error", "message": "try again"}}
        provider = OpenAIProvider(api_key="k", transport=_mock(body=body))
        with self.assertRaises(ProviderAPIError) as ctx:
            await provider.chat(_user())
        self.assertEqual(ctx.exception.error_message, "try again")

    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        provider = OpenAIProvider(api_key="k", transport=httpx.MockTransport(handler))
        with self.assertRaises(ProviderTransportError) as ctx:
            await provider.chat(_user())
        self.assertEqual(ctx.exception.provider, "openai")
