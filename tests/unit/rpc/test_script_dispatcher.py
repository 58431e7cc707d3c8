"""Tests for the ScriptDispatcher run/input/abort methods."""

import asyncio

import pytest

from clipdrive.config.schema import Config, ScriptingConfig
from clipdrive.proxy import MemoryProxy
from clipdrive.rpc.dispatcher import ScriptDispatcher
from clipdrive.rpc.protocol import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    parse_message_notification,
)
from clipdrive.rpc.types import MessageStatus, Request
from clipdrive.scripting import ScriptEngine


class Notifications:
    def __init__(self):
        self.requests: list[Request] = []

    async def __call__(self, request: Request) -> None:
        self.requests.append(request)

    def messages(self, invocation_id: str):
        decoded = [parse_message_notification(r) for r in self.requests]
        return [m for i, m in decoded if i == invocation_id]


@pytest.fixture
def proxy():
    return MemoryProxy()


@pytest.fixture
def notifications():
    return Notifications()


@pytest.fixture
def dispatcher(proxy, notifications):
    config = Config(
        scripting=ScriptingConfig(clipboard_poll_interval_ms=1, crlf_line_endings=False)
    )
    return ScriptDispatcher(ScriptEngine(proxy, config=config), notifications)


def run_request(params, request_id=1):
    return Request(jsonrpc="2.0", method="run", params=params, id=request_id)


class TestRun:
    @pytest.mark.asyncio
    async def test_success(self, dispatcher, notifications):
        response = await dispatcher.dispatch(
            run_request({"command": "str", "args": ["hi"], "invocation_id": "a"})
        )

        assert response.result == {"invocation_id": "a", "result": "success", "error_kind": None}
        messages = notifications.messages("a")
        assert [(m.status, m.payload) for m in messages] == [(MessageStatus.SUCCESS, b"hi")]

    @pytest.mark.asyncio
    async def test_generated_invocation_id(self, dispatcher):
        response = await dispatcher.dispatch(run_request({"command": "length"}))
        assert len(response.result["invocation_id"]) == 16

    @pytest.mark.asyncio
    async def test_command_error(self, dispatcher, notifications):
        response = await dispatcher.dispatch(
            run_request({"command": "copy", "args": ["a", "b", "c"], "invocation_id": "e"})
        )

        assert response.error is None
        assert response.result["result"] == "error"
        assert response.result["error_kind"] == "invalid_argument_count"
        assert notifications.messages("e")[0].status is MessageStatus.ERROR

    @pytest.mark.asyncio
    async def test_binary_arguments_decoded(self, dispatcher, proxy):
        await dispatcher.dispatch(
            run_request(
                {
                    "command": "copy",
                    "args": ["image/png", {"mime": "image/png", "base64": "AP8="}],
                }
            )
        )
        assert proxy.get_clipboard_data("image/png") == b"\x00\xff"

    @pytest.mark.asyncio
    async def test_current_path_and_action_id(self, dispatcher, notifications, proxy):
        proxy.set_action_data("job", {"text/plain": b"payload"})
        await dispatcher.dispatch(
            run_request({"command": "currentpath", "current_path": "/w", "invocation_id": "p"})
        )
        await dispatcher.dispatch(
            run_request(
                {"command": "data", "args": ["text/plain"], "action_id": "job", "invocation_id": "d"}
            )
        )
        assert notifications.messages("p")[0].payload == b"/w"
        assert notifications.messages("d")[0].payload == b"payload"

    @pytest.mark.asyncio
    async def test_exit_requests_shutdown(self, dispatcher, notifications):
        assert dispatcher.should_shutdown is False
        response = await dispatcher.dispatch(run_request({"command": "exit", "invocation_id": "x"}))
        assert response.result["result"] == "finished"
        assert dispatcher.should_shutdown is True
        assert notifications.messages("x")[0].status is MessageStatus.FINISHED

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params,match",
        [
            ({}, "command"),
            ({"command": 5}, "command"),
            ({"command": "str", "args": "x"}, "args must be a list"),
            ({"command": "str", "args": [[1]]}, "Unsupported argument"),
        ],
    )
    async def test_invalid_params(self, dispatcher, params, match):
        response = await dispatcher.dispatch(run_request(params))
        assert response.error["code"] == INVALID_PARAMS
        assert match in response.error["message"]

    @pytest.mark.asyncio
    async def test_unknown_method(self, dispatcher):
        response = await dispatcher.dispatch(Request(jsonrpc="2.0", method="eval", id=1))
        assert response.error["code"] == METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_notification_gets_no_response(self, dispatcher):
        response = await dispatcher.dispatch(run_request({"command": "length"}, request_id=None))
        assert response is None


class TestInputAndAbort:
    @pytest.mark.asyncio
    async def test_input_resumes_running_invocation(self, dispatcher, notifications):
        task = asyncio.create_task(
            dispatcher.dispatch(run_request({"command": "input", "invocation_id": "i"}))
        )
        while not notifications.requests:
            await asyncio.sleep(0)
        assert dispatcher.active_invocations == ["i"]
        assert notifications.messages("i")[0].status is MessageStatus.READ_INPUT_REQUEST

        reply = await dispatcher.dispatch(
            Request(
                jsonrpc="2.0",
                method="input",
                params={"invocation_id": "i", "payload": "ZGF0YQ=="},
                id=2,
            )
        )
        assert reply.result == {"accepted": True, "invocation_id": "i"}

        response = await asyncio.wait_for(task, timeout=1)
        assert response.result["result"] == "success"
        assert notifications.messages("i")[-1].payload == b"data"
        assert dispatcher.active_invocations == []

    @pytest.mark.asyncio
    async def test_abort_running_invocation(self, dispatcher, notifications):
        task = asyncio.create_task(
            dispatcher.dispatch(run_request({"command": "input", "invocation_id": "i"}))
        )
        while not notifications.requests:
            await asyncio.sleep(0)

        reply = await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="abort", params={"invocation_id": "i"}, id=2)
        )
        assert reply.result == {"cancelled": True, "invocation_id": "i"}

        response = await asyncio.wait_for(task, timeout=1)
        assert response.result["result"] == "aborted"
        assert len(notifications.messages("i")) == 1

    @pytest.mark.asyncio
    async def test_duplicate_invocation_id_rejected(self, dispatcher, notifications):
        task = asyncio.create_task(
            dispatcher.dispatch(run_request({"command": "input", "invocation_id": "i"}))
        )
        while not notifications.requests:
            await asyncio.sleep(0)

        response = await dispatcher.dispatch(run_request({"command": "str", "args": ["x"], "invocation_id": "i"}, 2))
        assert response.error["code"] == INVALID_PARAMS

        await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="abort", params={"invocation_id": "i"}, id=3)
        )
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_abort_unknown(self, dispatcher):
        reply = await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="abort", params={"invocation_id": "zz"}, id=1)
        )
        assert reply.result == {
            "cancelled": False,
            "invocation_id": "zz",
            "reason": "not_found_or_completed",
        }

    @pytest.mark.asyncio
    async def test_input_unknown(self, dispatcher):
        reply = await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="input", params={"invocation_id": "zz"}, id=1)
        )
        assert reply.result == {"accepted": False, "invocation_id": "zz"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["input", "abort"])
    async def test_missing_invocation_id(self, dispatcher, method):
        reply = await dispatcher.dispatch(Request(jsonrpc="2.0", method=method, params={}, id=1))
        assert reply.error["code"] == INVALID_PARAMS
        assert "invocation_id" in reply.error["message"]

    @pytest.mark.asyncio
    async def test_input_invalid_payload(self, dispatcher):
        reply = await dispatcher.dispatch(
            Request(
                jsonrpc="2.0",
                method="input",
                params={"invocation_id": "i", "payload": "%%%"},
                id=1,
            )
        )
        assert reply.error["code"] == INVALID_PARAMS
