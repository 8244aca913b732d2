"""
Reverie: an interactive storytelling client that streams a generative model's
replies to the terminal with a typewriter effect.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .errors import (
    ConfigurationError,
    InstructionsError,
    ReverieError,
    StreamError,
    UserInputError,
)
from .llm import ChatMessage, LLMProvider, LLMStreamError, create_llm_provider
from .render import TimingPolicy, TypewriterRenderer
from .story import StoryDriver, StorySession, build_turn_message, load_instructions

__all__ = [
    "ChatMessage",
    "ConfigurationError",
    "InstructionsError",
    "LLMProvider",
    "LLMStreamError",
    "ReverieError",
    "StoryDriver",
    "StorySession",
    "StreamError",
    "TimingPolicy",
    "TypewriterRenderer",
    "UserInputError",
    "build_turn_message",
    "create_llm_provider",
    "load_instructions",
]
