from .driver import StoryDriver, build_turn_message, log_stream_failure
from .instructions import load_instructions
from .session import StorySession

__all__ = [
    "StoryDriver",
    "StorySession",
    "build_turn_message",
    "load_instructions",
    "log_stream_failure",
]
