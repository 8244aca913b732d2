"""Request/response loop of an interactive story.

Hidden design decisions:
- How user answers are read and validated (trimmed, never empty)
- The instruction template wrapped around every answer after the first
- Translation of any provider failure into StreamError
"""

import asyncio
import logging
from collections.abc import Callable

from rich.console import Console

from ..config import TURN_PROMPT, TURN_TEMPLATE, UNPLUGGED_MESSAGE
from ..errors import StreamError, UserInputError
from ..llm import LLMStreamError
from ..render import TypewriterRenderer
from .session import StorySession

logger = logging.getLogger(__name__)


def build_turn_message(text: str, first: bool = False) -> str:
    """Return the message sent to the model for a user answer.

    The answer to the opening question goes out verbatim; later answers are
    wrapped in a short instruction asking for the next paragraph.
    """
    if first:
        return text
    return TURN_TEMPLATE.format(text=text)


class StoryDriver:
    """Runs the prompt, send, render loop of a session.

    Errors are raised, never handled here: a failed turn raises StreamError
    and closed input raises UserInputError, both fatal to the session.
    """

    def __init__(
        self,
        session: StorySession,
        renderer: TypewriterRenderer,
        read_line: Callable[[], str] | None = None,
        stop: asyncio.Event | None = None,
    ):
        """Initialize the driver.

        Args:
            session: Conversation with the model
            renderer: Typewriter renderer used for all story output
            read_line: Returns one line of user input (default: rich Console.input)
            stop: Optional signal that abandons the current stream and ends play
        """
        self._session = session
        self._renderer = renderer
        self._read_line = read_line or Console().input
        self._stop = stop

    @property
    def session(self) -> StorySession:
        return self._session

    def _stopped(self) -> bool:
        return self._stop is not None and self._stop.is_set()

    async def prompt_user(self, label: str) -> str:
        """Ask ``label`` until a non-blank answer is given.

        Returns:
            The answer with surrounding whitespace removed

        Raises:
            UserInputError: Input was closed or could not be read
        """
        while True:
            await self._renderer.emit_text(f"{label} ")
            try:
                line = self._read_line()
            except (EOFError, OSError) as e:
                raise UserInputError(f"Error reading input: {str(e) or 'end of input'}") from e

            answer = line.strip()
            if answer:
                return answer

    async def run_turn(self, text: str, *, first: bool = False) -> str:
        """Send one user answer and render the streamed reply.

        Returns:
            The full reply text

        Raises:
            StreamError: The model service failed before or during the stream
        """
        message = build_turn_message(text, first=first)
        logger.debug("Sending turn of %d characters (first=%s)", len(message), first)

        await self._renderer.emit_text("\n\n")
        try:
            stream = await self._session.send_message_stream(message)
            reply = await self._renderer.emit_stream(stream, stop=self._stop)
        except LLMStreamError as e:
            raise StreamError(e) from e
        except Exception as e:
            raise StreamError(LLMStreamError.from_exception(e)) from e
        await self._renderer.emit_char("\n")

        return reply

    async def play(self, max_turns: int | None = None) -> None:
        """Run the story: the opening exchange, then follow-up turns.

        Args:
            max_turns: Follow-up turns to play after the opening exchange
                (None plays until interrupted or a fatal error)
        """
        await self._renderer.emit_char("\n")
        topic = await self.prompt_user(self._session.opening_question)
        await self.run_turn(topic, first=True)

        turns = 0
        while max_turns is None or turns < max_turns:
            if self._stopped():
                logger.info("Stop requested, ending session")
                return
            await self._renderer.emit_char("\n")
            action = await self.prompt_user(TURN_PROMPT)
            await self.run_turn(action)
            turns += 1

    async def report_failure(self, error: StreamError) -> None:
        """Tell the player the dream is over and log the service diagnostics."""
        await self._renderer.emit_text(UNPLUGGED_MESSAGE)
        log_stream_failure(error.failure)


def log_stream_failure(failure: LLMStreamError) -> None:
    """Log every diagnostic field the model service returned."""
    logger.error("Error sending message: err=%s", failure)
    if failure.code is not None or failure.status:
        logger.error("Status: %s %s", failure.code if failure.code is not None else "", failure.status or "")
    if failure.reason:
        logger.error("Reason: %s", failure.reason)
    if failure.help_links:
        logger.error("Help links: %s", ", ".join(failure.help_links))
    logger.error("Status message: %s", failure.message)
    for detail in failure.details:
        logger.error("- Details: %s", detail)
