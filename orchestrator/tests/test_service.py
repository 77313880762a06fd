"""Tests for OrchestratorService wiring and the capture backend switch."""

import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from django.test import TestCase, override_settings

from orchestrator import get_orchestrator_service
from orchestrator.core.providers import OpenAIProvider
from orchestrator.pipelines.agent_loop import AgentLoop
from orchestrator.service.capture import CallLogCaptureSink, TokenEvalCaptureSink
from orchestrator.service.errors import ConfigurationError
from orchestrator.service.orchestrator_service import OrchestratorService, build_capture_sink
from orchestrator.tests.utils import write_manifest


class BuildCaptureSinkTests(TestCase):

    def test_backends(self):
        self.assertIsInstance(build_capture_sink("token-eval"), TokenEvalCaptureSink)
        self.assertIsInstance(build_capture_sink("call-log"), CallLogCaptureSink)
        self.assertIsNone(build_capture_sink("none"))

    def test_unknown_backend(self):
        with self.assertRaises(ConfigurationError) as ctx:
            build_capture_sink("prometheus")
        self.assertIn("prometheus", str(ctx.exception))

    @override_settings(ORCHESTRATOR_EVAL_BINARY="my-eval")
    def test_token_eval_binary_from_settings(self):
        self.assertEqual(build_capture_sink("token-eval").binary, "my-eval")


class OrchestratorServiceTests(TestCase):

    def test_run_delegates_to_loop(self):
        loop = MagicMock(spec=AgentLoop)
        loop.run = AsyncMock(return_value="answer")
        service = OrchestratorService(loop=loop)

        self.assertEqual(service.run("cron:daily", "report"), "answer")
        loop.run.assert_awaited_once_with("cron:daily", "report")

    @override_settings(ORCHESTRATOR_SESSION_KEY="default-key")
    def test_missing_session_key_uses_default(self):
        loop = MagicMock(spec=AgentLoop)
        loop.run = AsyncMock(return_value="ok")
        OrchestratorService(loop=loop).run(None, "hi")
        loop.run.assert_awaited_once_with("default-key", "hi")

    async def test_arun(self):
        loop = MagicMock(spec=AgentLoop)
        loop.run = AsyncMock(return_value="async answer")
        self.assertEqual(await OrchestratorService(loop=loop).arun("main", "hi"), "async answer")

    def test_builds_loop_from_settings(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        root = Path(tmp.name)
        write_manifest(root / "tools", {
            "name": "todo", "binary": "todo-mgmt", "commands": {"list": {"description": "List"}},
        })

        with override_settings(
            ORCHESTRATOR_PROVIDER="openai",
            ORCHESTRATOR_API_KEY="sk-test",
            ORCHESTRATOR_MODEL="gpt-4o-mini",
            ORCHESTRATOR_BASE_URL="",
            ORCHESTRATOR_MAX_ITERATIONS=7,
            ORCHESTRATOR_MAX_TOKENS=512,
            ORCHESTRATOR_TOOL_DIRS=[str(root / "tools")],
            ORCHESTRATOR_SESSION_DIR=root / "sessions",
            ORCHESTRATOR_WORKSPACE=root,
            ORCHESTRATOR_CAPTURE_BACKEND="call-log",
        ):
            loop = OrchestratorService().loop

        self.assertIsInstance(loop.provider, OpenAIProvider)
        self.assertEqual(loop.provider.model, "gpt-4o-mini")
        self.assertEqual([t.name for t in loop.tools], ["todo.list"])
        self.assertEqual(loop.config.max_iterations, 7)
        self.assertEqual(loop.config.max_tokens, 512)
        self.assertEqual(loop.config.model, "gpt-4o-mini")
        self.assertIsInstance(loop.capture_sink, CallLogCaptureSink)
        self.assertTrue((root / "sessions").is_dir())

    @override_settings(ORCHESTRATOR_PROVIDER="gemini")
    def test_unknown_provider_setting(self):
        with self.assertRaises(ConfigurationError):
            OrchestratorService().loop

    def test_get_orchestrator_service_returns_singleton(self):
        self.assertIs(get_orchestrator_service(), get_orchestrator_service())
