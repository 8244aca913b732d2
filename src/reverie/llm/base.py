from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, StreamingResponse


class LLMProvider(ABC):
    """Abstract base class for streaming text-generation providers.

    This module hides the design decision of which model service tells the story.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Conversion of the conversation history to the wire format
    - Translation of service failures into LLMStreamError

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            stream = await provider.chat_completion_stream(messages)
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Get the default model name."""

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion.

        Args:
            messages: Conversation history, including the system turn and the
                new user message as the last entry
            model: Model to use (None uses provider's default)
            temperature: Sampling temperature (None uses the service default)
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse that yields text fragments in arrival order.
            After iteration, access usage via stream_response.usage

        Raises:
            LLMStreamError: The service rejected the request or the stream broke
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            # Suppress harmless cleanup errors from httpx/anyio
            if "Event loop is closed" not in str(e):
                raise
