"""Pytest configuration and shared fixtures."""
import io
import os
from typing import Any

import pytest
from rich.console import Console

from reverie.llm import ChatMessage, LLMProvider, StreamingResponse
from reverie.render import TimingPolicy, TypewriterRenderer


class ScriptedProvider(LLMProvider):
    """LLM provider that replays scripted replies and records every request.

    Each reply is a list of fragments; an exception in the list is raised at
    that point of the stream.
    """

    def __init__(self, replies: list[list[Any]]):
        self.replies = list(replies)
        self.requests: list[list[ChatMessage]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "scripted"

    async def chat_completion_stream(self, messages, model=None, temperature=None, **kwargs):
        self.requests.append(list(messages))
        reply = self.replies.pop(0) if self.replies else []
        return StreamingResponse(self._generate(reply))

    async def _generate(self, reply):
        for item in reply:
            if isinstance(item, BaseException):
                raise item
            yield item

    async def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested pauses."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY"),
    }


@pytest.fixture
def make_provider():
    """Return a factory for scripted providers."""
    return ScriptedProvider


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def console():
    """Console writing plain text to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


@pytest.fixture
def timing():
    return TimingPolicy(character=0.01, sentence=0.5)


@pytest.fixture
def renderer(console, timing, sleep):
    return TypewriterRenderer(console=console, timing=timing, sleep=sleep)


@pytest.fixture
def output(console):
    """Return a callable reading everything written to the console so far."""
    return lambda: console.file.getvalue()


@pytest.fixture
def instructions_file(tmp_path):
    """Create a temporary system instructions file."""
    path = tmp_path / "system-instructions.md"
    path.write_text("You narrate dreams in the second person.\n", encoding="utf-8")
    return path
