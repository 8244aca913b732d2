from .base import LLMProvider
from .errors import LLMStreamError
from .factory import create_llm_provider
from .models import ChatMessage, StreamingResponse
from .providers import GeminiProvider

__all__ = [
    "LLMProvider",
    "LLMStreamError",
    "create_llm_provider",
    "ChatMessage",
    "StreamingResponse",
    "GeminiProvider",
]
