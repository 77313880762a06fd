"""Tests for the subprocess tool executor and its argument building."""

import asyncio
import json
import os
import tempfile
from pathlib import Path

from django.test import SimpleTestCase

from orchestrator.service.errors import (
    InvalidToolNameError,
    ToolArgumentsError,
    ToolExecutionError,
    ToolTimeoutError,
    UnknownCommandError,
    UnknownToolError,
)
from orchestrator.tools.executor import (
    ToolExecutor,
    build_command_args,
    format_argument,
    parse_arguments,
)
from orchestrator.tools.manifest import CommandDef, ParameterDef, ToolManifest
from orchestrator.tools.registry import ToolRegistry
from orchestrator.tests.utils import write_fake_tool
from orchestrator.types.messages import ToolCall


def _call(name, arguments="{}", call_id="call_1"):
    return ToolCall(id=call_id, name=name, arguments=arguments)


class BuildCommandArgsTests(SimpleTestCase):

    def test_template_substitution(self):
        command = CommandDef(args="{text}", parameters={"text": ParameterDef()})
        self.assertEqual(build_command_args("run", command, {"text": "hi"}), ["run", "hi"])

    def test_absent_placeholder_tokens_are_dropped(self):
        command = CommandDef(args="{text}", parameters={"text": ParameterDef()})
        self.assertEqual(build_command_args("run", command, {}), ["run"])

    def test_template_mixes_literals_and_values(self):
        command = CommandDef(args="get {resource} --namespace={namespace} -o wide")
        argv = build_command_args("get", command, {"resource": "pods"})
        self.assertEqual(argv, ["get", "get", "pods", "-o", "wide"])

    def test_template_keeps_structured_argument_in_one_token(self):
        command = CommandDef(args="tag {labels}")
        argv = build_command_args("x", command, {"labels": ["a", "b"]})
        self.assertEqual(argv, ["x", "tag", '["a","b"]'])

    def test_template_object_argument_is_not_mistaken_for_placeholder(self):
        command = CommandDef(args="patch {patch} {extra}")
        argv = build_command_args("x", command, {"patch": {"spec": {"replicas": 2}}})
        self.assertEqual(argv, ["x", "patch", '{"spec":{"replicas":2}}'])

    def test_template_ignores_extra_arguments(self):
        command = CommandDef(args="show {id}")
        self.assertEqual(build_command_args("x", command, {"id": 7, "extra": "y"}), ["x", "show", "7"])

    def test_flag_mode(self):
        argv = build_command_args("add", CommandDef(), {"title": "buy milk", "priority": 2, "done": False})
        self.assertEqual(argv, ["add", "--title", "buy milk", "--priority", "2", "--done", "false"])

    def test_flag_mode_skips_stdin_parameter(self):
        command = CommandDef(stdin=True)
        argv = build_command_args("write", command, {"path": "a.txt", "content": "body"})
        self.assertEqual(argv, ["write", "--path", "a.txt"])

    def test_format_argument(self):
        self.assertEqual(format_argument("s"), "s")
        self.assertEqual(format_argument(True), "true")
        self.assertEqual(format_argument(None), "")
        self.assertEqual(format_argument(3.0), "3")
        self.assertEqual(format_argument(2.5), "2.5")
        self.assertEqual(format_argument([1, "a"]), '[1,"a"]')
        self.assertEqual(format_argument({"k": [1, 2]}), '{"k":[1,2]}')
        self.assertEqual(json.loads(format_argument({"k": 1})), {"k": 1})

    def test_parse_arguments(self):
        self.assertEqual(parse_arguments(""), {})
        self.assertEqual(parse_arguments("  "), {})
        self.assertEqual(parse_arguments("null"), {})
        self.assertEqual(parse_arguments('{"a": 1}'), {"a": 1})
        with self.assertRaises(ToolArgumentsError):
            parse_arguments("{bad")
        with self.assertRaises(ToolArgumentsError):
            parse_arguments("[1, 2]")


class ToolExecutorTests(SimpleTestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        binary = write_fake_tool(Path(tmp.name))

        self.registry = ToolRegistry()
        self.registry.register(ToolManifest(
            name="fake",
            binary=str(binary),
            commands={
                "say": CommandDef(args="{text}", parameters={"text": ParameterDef(required=True)}),
                "flags": CommandDef(),
                "write": CommandDef(stdin=True),
                "fail": CommandDef(),
                "quiet-fail": CommandDef(),
                "nap": CommandDef(args="{seconds}"),
            },
        ))
        self.registry.register(ToolManifest(
            name="ghost",
            binary=os.path.join(tmp.name, "missing-binary"),
            commands={"run": CommandDef()},
        ))
        self.executor = ToolExecutor(self.registry, timeout=5)

    async def test_template_command_output(self):
        output = await self.executor.execute(_call("fake.say", '{"text": "hello"}'))
        self.assertEqual(output, "hello\n")

    async def test_same_call_gives_same_output(self):
        call = _call("fake.say", '{"text": "again"}')
        first = await self.executor.execute(call)
        second = await self.executor.execute(call)
        self.assertEqual(first, second)

    async def test_flag_mode_command_output(self):
        output = await self.executor.execute(_call("fake.flags", '{"name": "x", "count": 3}'))
        self.assertEqual(output, "--name x --count 3\n")

    async def test_stdin_parameter_is_piped(self):
        output = await self.executor.execute(_call("fake.write", '{"content": "line one\\nline two"}'))
        self.assertEqual(output, "line one\nline two")

    async def test_stdin_closed_when_parameter_absent(self):
        output = await self.executor.execute(_call("fake.write", "{}"))
        self.assertEqual(output, "")

    async def test_nonzero_exit_surfaces_stripped_stderr(self):
        with self.assertRaises(ToolExecutionError) as ctx:
            await self.executor.execute(_call("fake.fail"))
        self.assertEqual(str(ctx.exception), "fake.fail failed: something broke")

    async def test_nonzero_exit_without_stderr_reports_status(self):
        with self.assertRaises(ToolExecutionError) as ctx:
            await self.executor.execute(_call("fake.quiet-fail"))
        self.assertIn("exit status 4", str(ctx.exception))

    async def test_timeout_kills_process(self):
        executor = ToolExecutor(self.registry, timeout=0.2)
        with self.assertRaises(ToolTimeoutError) as ctx:
            await executor.execute(_call("fake.nap", '{"seconds": 5}'))
        self.assertIn("timed out", str(ctx.exception))

    async def test_caller_cancellation_propagates(self):
        with self.assertRaises(asyncio.TimeoutError):
            await asyncio.wait_for(self.executor.execute(_call("fake.nap", '{"seconds": 5}')), timeout=0.2)

    async def test_missing_binary(self):
        with self.assertRaises(ToolExecutionError):
            await self.executor.execute(_call("ghost.run"))

    async def test_invalid_names(self):
        for name in ["noseparator", ".say", "fake.", ""]:
            with self.subTest(name=name):
                with self.assertRaises(InvalidToolNameError):
                    await self.executor.execute(_call(name))

    async def test_unknown_tool_and_command(self):
        with self.assertRaises(UnknownToolError):
            await self.executor.execute(_call("nope.say"))
        with self.assertRaises(UnknownCommandError):
            await self.executor.execute(_call("fake.nope"))

    async def test_bad_arguments(self):
        with self.assertRaises(ToolArgumentsError):
            await self.executor.execute(_call("fake.say", "{oops"))

    def test_resolve_splits_on_first_dot(self):
        self.registry.register(ToolManifest(name="a", binary="a", commands={"b.c": CommandDef()}))
        manifest, command_name, _ = self.executor.resolve("a.b.c")
        self.assertEqual((manifest.name, command_name), ("a", "b.c"))
