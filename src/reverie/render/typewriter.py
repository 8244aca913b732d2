"""Typewriter-style rendering of a live text stream.

Characters are written one at a time with a short pause after each and a
longer pause after every period. Lines are soft-wrapped by turning the first
space past the wrap column into a newline; there is no lookahead, so a long
word can run past the column before the break happens.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console

from ..config import CHARACTER_DELAY, SENTENCE_DELAY, WRAP_COLUMN

Sleep = Callable[[float], Awaitable[None]]


class TimingPolicy(BaseModel):
    """Pauses applied while rendering, in seconds."""

    model_config = ConfigDict(frozen=True)

    character: float = Field(default=CHARACTER_DELAY, ge=0, description="Pause after every character")
    sentence: float = Field(default=SENTENCE_DELAY, ge=0, description="Extra pause after '.'")


class TypewriterRenderer:
    """Writes text to a console character by character, tracking the column.

    The column is the only state: it resets on every newline written
    (explicit or soft wrap) and otherwise counts written characters.
    """

    def __init__(
        self,
        console: Console | None = None,
        timing: TimingPolicy | None = None,
        wrap_column: int = WRAP_COLUMN,
        sleep: Sleep = asyncio.sleep,
    ):
        self._console = console or Console()
        self._timing = timing or TimingPolicy()
        self._wrap_column = wrap_column
        self._sleep = sleep
        self._column = 0

    @property
    def column(self) -> int:
        """Current column on the output line."""
        return self._column

    def _write(self, text: str) -> None:
        # Raw write: rich would expand tabs and drop control characters
        self._console.file.write(text)
        self._console.file.flush()

    async def emit_char(self, c: str) -> None:
        """Render a single character and pause."""
        if c == ".":
            self._write(c)
            self._column += 1
            await self._sleep(self._timing.sentence)
        elif c == "\n":
            self._write(c)
            self._column = 0
        elif c == " ":
            if self._column == 0:
                pass  # no leading blanks
            elif self._column > self._wrap_column:
                self._write("\n")
                self._column = 0
            else:
                self._write(c)
                self._column += 1
        else:
            self._write(c)
            self._column += 1

        await self._sleep(self._timing.character)

    async def emit_text(self, text: str) -> None:
        """Render every character of ``text`` in order."""
        for c in text:
            await self.emit_char(c)

    async def emit_stream(
        self,
        fragments: AsyncIterator[str],
        stop: asyncio.Event | None = None,
    ) -> str:
        """Render fragments as they arrive and return the full text.

        Args:
            fragments: Finite async iterator of text fragments
            stop: Optional signal checked before and after pulling each
                fragment; once set, nothing more is pulled or rendered

        Returns:
            Concatenation of every fragment rendered
        """
        def stopped() -> bool:
            return stop is not None and stop.is_set()

        rendered: list[str] = []
        if stopped():
            return ""
        async for fragment in fragments:
            if stopped():
                break
            await self.emit_text(fragment)
            rendered.append(fragment)
            if stopped():
                break
        return "".join(rendered)
