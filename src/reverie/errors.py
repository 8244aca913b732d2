"""Exception hierarchy for a storytelling session.

Helpers raise; only the command-line entry point decides the exit status.
"""

from .llm.errors import LLMStreamError


class ReverieError(Exception):
    """Base class for every fatal session error."""


class ConfigurationError(ReverieError):
    """Credential missing or provider misconfigured."""


class InstructionsError(ReverieError):
    """The system instructions file could not be read."""


class UserInputError(ReverieError):
    """Standard input closed or failed while waiting for an answer."""


class StreamError(ReverieError):
    """The model service failed mid-turn. No retry is attempted."""

    def __init__(self, failure: LLMStreamError):
        super().__init__(f"Error sending message: {failure}")
        self.failure = failure
