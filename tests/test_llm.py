"""Unit tests for the LLM module."""
from types import SimpleNamespace

import pytest
from google.genai import errors, types

from reverie.llm import (
    ChatMessage,
    GeminiProvider,
    LLMProvider,
    LLMStreamError,
    create_llm_provider,
)

QUOTA_ERROR_BODY = {
    "error": {
        "code": 429,
        "message": "Resource has been exhausted (e.g. check quota).",
        "status": "RESOURCE_EXHAUSTED",
        "details": [
            {
                "@type": "type.googleapis.com/google.rpc.ErrorInfo",
                "reason": "RATE_LIMIT_EXCEEDED",
                "domain": "googleapis.com",
            },
            {
                "@type": "type.googleapis.com/google.rpc.Help",
                "links": [
                    {"description": "Quota docs", "url": "https://ai.google.dev/gemini-api/docs/rate-limits"},
                    {"url": "https://aistudio.google.com/"},
                ],
            },
        ],
    }
}


class FakeAPIError(Exception):
    """Exception shaped like google.genai.errors.APIError."""

    def __init__(self, code, details):
        super().__init__(f"{code} error")
        self.code = code
        self.status = None
        self.message = None
        self.details = details


def _chunk(text: str | None = None, usage: dict | None = None) -> types.GenerateContentResponse:
    candidates = None
    if text is not None:
        candidates = [types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)]))]
    usage_metadata = types.GenerateContentResponseUsageMetadata(**usage) if usage else None
    return types.GenerateContentResponse(candidates=candidates, usage_metadata=usage_metadata)


def _fake_client(generate_content_stream):
    return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(
        generate_content_stream=generate_content_stream
    )))


class TestLLMProviderInterface:
    """Tests for the abstract LLMProvider interface."""

    def test_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore


class TestChatMessage:
    """Tests for ChatMessage model."""

    def test_create_message(self):
        message = ChatMessage(role="assistant", content="What do you want to dream about?")

        assert message.role == "assistant"
        assert message.content == "What do you want to dream about?"

    def test_unknown_role_fails(self):
        with pytest.raises(ValueError):
            ChatMessage(role="narrator", content="hello")


class TestLLMStreamError:
    """Tests for extracting diagnostics from service errors."""

    def test_from_google_error_body(self):
        failure = LLMStreamError.from_exception(FakeAPIError(429, QUOTA_ERROR_BODY))

        assert failure.code == 429
        assert failure.status == "RESOURCE_EXHAUSTED"
        assert failure.message == "Resource has been exhausted (e.g. check quota)."
        assert failure.reason == "RATE_LIMIT_EXCEEDED"
        assert failure.help_links == [
            "Quota docs: https://ai.google.dev/gemini-api/docs/rate-limits",
            "https://aistudio.google.com/",
        ]
        assert len(failure.details) == 2

    def test_from_list_wrapped_body(self):
        failure = LLMStreamError.from_exception(FakeAPIError(429, [QUOTA_ERROR_BODY]))

        assert failure.reason == "RATE_LIMIT_EXCEEDED"
        assert failure.status == "RESOURCE_EXHAUSTED"

    def test_from_real_client_error(self):
        error = errors.ClientError(429, QUOTA_ERROR_BODY)
        failure = LLMStreamError.from_exception(error)

        assert failure.code == 429
        assert failure.reason == "RATE_LIMIT_EXCEEDED"
        assert failure.__cause__ is error

    def test_from_transport_error(self):
        failure = LLMStreamError.from_exception(ConnectionError("connection reset by peer"))

        assert failure.message == "connection reset by peer"
        assert failure.code is None
        assert failure.reason is None
        assert failure.help_links == []
        assert failure.details == []

    def test_empty_exception_uses_type_name(self):
        failure = LLMStreamError.from_exception(TimeoutError())

        assert failure.message == "TimeoutError"

    def test_existing_error_returned_unchanged(self):
        original = LLMStreamError("boom", reason="X")

        assert LLMStreamError.from_exception(original) is original


class TestGeminiProvider:
    """Tests for GeminiProvider."""

    def test_default_model(self):
        provider = GeminiProvider(api_key="fake-key")

        assert provider.model == "gemini-2.5-flash"

    def test_convert_messages(self):
        provider = GeminiProvider(api_key="fake-key")
        system_instruction, contents = provider._convert_messages([
            ChatMessage(role="system", content="Narrate dreams."),
            ChatMessage(role="assistant", content="What do you want to dream about?"),
            ChatMessage(role="user", content="a forest of glass trees"),
        ])

        assert system_instruction == "Narrate dreams."
        assert [c.role for c in contents] == ["model", "user"]
        assert contents[1].parts[0].text == "a forest of glass trees"

    def test_extract_content_joins_parts(self):
        provider = GeminiProvider(api_key="fake-key")
        response = types.GenerateContentResponse(candidates=[
            types.Candidate(content=types.Content(
                role="model",
                parts=[types.Part(text="Glass "), types.Part(text="leaves chime.")]
            ))
        ])

        assert provider._extract_content(response) == "Glass leaves chime."

    def test_extract_content_without_candidates(self):
        provider = GeminiProvider(api_key="fake-key")

        assert provider._extract_content(types.GenerateContentResponse()) == ""

    async def test_stream_yields_text_and_usage(self):
        provider = GeminiProvider(api_key="fake-key", model="gemini-test")
        calls = []

        async def generate_content_stream(model, contents, config):
            calls.append((model, contents, config))

            async def chunks():
                yield _chunk("You wake ")
                yield _chunk("")
                yield _chunk("in a field.", usage={
                    "prompt_token_count": 12,
                    "candidates_token_count": 5,
                    "total_token_count": 17,
                })
            return chunks()

        provider._client = _fake_client(generate_content_stream)
        stream = await provider.chat_completion_stream([
            ChatMessage(role="system", content="Narrate dreams."),
            ChatMessage(role="user", content="a field"),
        ])
        fragments = [fragment async for fragment in stream]

        assert fragments == ["You wake ", "in a field."]
        assert stream.usage == {"prompt_tokens": 12, "completion_tokens": 5, "total_tokens": 17}
        model, contents, config = calls[0]
        assert model == "gemini-test"
        assert config.system_instruction is not None
        assert [c.role for c in contents] == ["user"]

    async def test_stream_translates_api_error(self):
        provider = GeminiProvider(api_key="fake-key")

        async def generate_content_stream(model, contents, config):
            raise errors.ClientError(429, QUOTA_ERROR_BODY)

        provider._client = _fake_client(generate_content_stream)
        stream = await provider.chat_completion_stream([ChatMessage(role="user", content="hi")])

        with pytest.raises(LLMStreamError) as exc_info:
            async for _ in stream:
                pass

        assert exc_info.value.reason == "RATE_LIMIT_EXCEEDED"
        assert exc_info.value.code == 429

    async def test_context_manager_closes(self):
        async with GeminiProvider(api_key="fake-key") as provider:
            assert provider.model == "gemini-2.5-flash"

    @pytest.mark.integration
    async def test_stream_real_api(self, api_keys):
        """Integration test: stream a short reply from the real API."""
        if not api_keys["gemini"]:
            pytest.skip("API_KEY not set")

        provider = GeminiProvider(api_key=api_keys["gemini"])
        try:
            stream = await provider.chat_completion_stream([
                ChatMessage(role="user", content="Say the word 'dream' and nothing else."),
            ])
            text = "".join([fragment async for fragment in stream])

            assert "dream" in text.lower()
        finally:
            await provider.close()


class TestLLMFactory:
    """Tests for LLM factory function."""

    def test_create_gemini_provider(self):
        provider = create_llm_provider("Gemini", api_key="fake-key", model="gemini-2.5-pro")

        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-pro"

    def test_missing_api_key_fails(self):
        with pytest.raises(TypeError, match="api_key"):
            create_llm_provider("gemini")

    def test_unsupported_provider_fails(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("openai", api_key="fake-key")
