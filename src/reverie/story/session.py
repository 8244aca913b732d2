"""Conversation state for one storytelling session."""

import logging
from collections.abc import AsyncIterator

from ..config import OPENING_QUESTION
from ..llm import ChatMessage, LLMProvider, StreamingResponse

logger = logging.getLogger(__name__)


class StorySession:
    """Holds the conversation history and sends new turns to the model.

    The history starts with the system instructions and the model's opening
    question. A turn is appended (user message, then the assembled reply)
    only once its stream has been read to the end.
    """

    def __init__(
        self,
        llm: LLMProvider,
        system_instruction: str,
        opening_question: str = OPENING_QUESTION,
    ):
        self._llm = llm
        self._opening_question = opening_question
        self._history: list[ChatMessage] = [
            ChatMessage(role="system", content=system_instruction),
            ChatMessage(role="assistant", content=opening_question),
        ]

    @property
    def opening_question(self) -> str:
        return self._opening_question

    @property
    def history(self) -> list[ChatMessage]:
        """Copy of the conversation so far, oldest first."""
        return list(self._history)

    async def send_message_stream(self, text: str) -> StreamingResponse:
        """Send ``text`` as the next user turn and stream the reply."""
        user_message = ChatMessage(role="user", content=text)
        stream = await self._llm.chat_completion_stream([*self._history, user_message])
        return StreamingResponse(self._record(user_message, stream))

    async def _record(self, user_message: ChatMessage, stream: StreamingResponse) -> AsyncIterator[str]:
        fragments: list[str] = []
        async for fragment in stream:
            fragments.append(fragment)
            yield fragment

        self._history.append(user_message)
        self._history.append(ChatMessage(role="assistant", content="".join(fragments)))
        if stream.usage:
            logger.debug("Turn usage: %s", stream.usage)
