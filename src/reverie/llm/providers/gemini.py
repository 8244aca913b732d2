"""Google Gemini LLM provider implementation.

Uses the official Google GenAI SDK for async streaming completions.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can stream chunks with no text (safety filtering, usage-only
trailers). Those chunks are skipped rather than rendered as empty fragments.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import errors, types

from ..base import LLMProvider
from ..errors import LLMStreamError
from ..models import ChatMessage, StreamingResponse

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """Google Gemini LLM provider implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - Message format conversion (system turn becomes the system instruction)
    - Translation of errors.APIError into LLMStreamError
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        **client_kwargs: Any
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key
            model: Default model (gemini-2.5-flash, gemini-2.5-pro, ...)
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    def _convert_messages(self, messages: list[ChatMessage]) -> tuple[str | None, list[types.Content]]:
        """Convert ChatMessage list to Gemini format.

        Args:
            messages: List of chat messages

        Returns:
            Tuple of (system_instruction, contents)
        """
        system_instruction = None
        contents = []

        for msg in messages:
            if msg.role == "system":
                system_instruction = msg.content
            elif msg.role == "user":
                contents.append(types.Content(
                    role="user",
                    parts=[types.Part(text=msg.content)]
                ))
            elif msg.role == "assistant":
                contents.append(types.Content(
                    role="model",
                    parts=[types.Part(text=msg.content)]
                ))

        return system_instruction, contents

    def _extract_content(self, response) -> str:
        """Join the text parts of every candidate in a streamed chunk."""
        texts = []
        for candidate in response.candidates or []:
            if candidate.content and candidate.content.parts:
                texts.extend(part.text for part in candidate.content.parts if part.text)
        return "".join(texts)

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion using Google Gemini.

        The request is issued lazily on the first iteration step, so every
        service failure surfaces while the stream is being consumed.
        """
        model_to_use = model or self._model
        system_instruction, contents = self._convert_messages(messages)

        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
            **kwargs
        )

        response = StreamingResponse(self._stream_generator(model_to_use, contents, config))
        self._current_stream_response = response
        return response

    async def _stream_generator(
        self,
        model: str,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
    ) -> AsyncIterator[str]:
        """Internal generator that yields text and captures usage from chunks."""
        usage = None
        logger.debug("Streaming from %s with %d history entries", model, len(contents))

        try:
            stream = await self._client.aio.models.generate_content_stream(
                model=model, contents=contents, config=config
            )
            async for chunk in stream:
                # Usage metadata arrives with the final chunk
                if chunk.usage_metadata:
                    usage = {
                        "prompt_tokens": chunk.usage_metadata.prompt_token_count or 0,
                        "completion_tokens": chunk.usage_metadata.candidates_token_count or 0,
                        "total_tokens": chunk.usage_metadata.total_token_count or 0,
                    }

                text = self._extract_content(chunk)
                if text:
                    yield text
        except errors.APIError as e:
            raise LLMStreamError.from_exception(e) from e

        if usage:
            self._current_stream_response.set_usage(usage)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
