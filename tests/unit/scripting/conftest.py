"""Fixtures for command engine tests."""

from __future__ import annotations

from typing import Any

import pytest

from clipdrive.config.schema import AutomationConfig, Config, ScriptingConfig
from clipdrive.proxy import MemoryProxy
from clipdrive.rpc.channel import ClientChannel
from clipdrive.rpc.types import ClientMessage, MessageStatus
from clipdrive.scripting import CommandOutput, InvocationContext, ScriptEngine

FAST_CONFIG = Config(
    scripting=ScriptingConfig(
        clipboard_poll_interval_ms=1,
        keys_delay_ms=0,
        crlf_line_endings=False,
    ),
    automation=AutomationConfig(raise_delay_ms=0, paste_settle_ms=0),
)


class Client:
    """Collects the messages an invocation sends to its client."""

    def __init__(self) -> None:
        self.messages: list[ClientMessage] = []

    async def sink(self, message: ClientMessage) -> None:
        self.messages.append(message)

    @property
    def statuses(self) -> list[MessageStatus]:
        return [m.status for m in self.messages]

    @property
    def last(self) -> ClientMessage:
        return self.messages[-1]


class Session:
    """Runs commands against one engine and records client traffic."""

    def __init__(self, engine: ScriptEngine) -> None:
        self.engine = engine
        self.client = Client()
        self.channel = ClientChannel(self.client.sink)
        self.ctx: InvocationContext = engine.new_context(self.channel)

    async def run(self, name: str, *args: Any) -> CommandOutput:
        """Run a top-level command in a fresh invocation."""
        self.client = Client()
        self.channel = ClientChannel(self.client.sink)
        self.ctx = self.engine.new_context(self.channel)
        return await self.engine.execute(name, list(args), self.ctx)

    async def output(self, name: str, *args: Any) -> bytes:
        """Payload of a command that must succeed."""
        result = await self.run(name, *args)
        assert self.client.last.status is MessageStatus.SUCCESS, self.client.last
        assert result.error_kind is None
        return self.client.last.payload


@pytest.fixture
def proxy() -> MemoryProxy:
    return MemoryProxy()


@pytest.fixture
def engine(proxy: MemoryProxy) -> ScriptEngine:
    return ScriptEngine(proxy, config=FAST_CONFIG)


@pytest.fixture
def session(engine: ScriptEngine) -> Session:
    return Session(engine)
