"""Configuration constants.

Centralizes magic numbers, environment variable names and fixed story text.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns WARNING if invalid."""
        return cls._from_string.get(level_str.lower(), cls.WARNING)


# Credentials and model
API_KEY_ENV = "API_KEY"
API_KEY_FALLBACK_ENV = "GEMINI_API_KEY"  # Accepted when API_KEY is unset
MODEL_ENV = "GEMINI_MODEL"
DEFAULT_MODEL = "gemini-2.5-flash"
API_KEY_HELP_URL = "https://aistudio.google.com/"

# System instructions file, read once at startup
SYSTEM_INSTRUCTIONS_FILE = "system-instructions.md"

# Typewriter pacing (seconds)
CHARACTER_DELAY = 0.03
SENTENCE_DELAY = 0.3

# Spaces after this column become line breaks
WRAP_COLUMN = 80

# Story text
OPENING_QUESTION = "What do you want to dream about?"
TURN_PROMPT = ">>"
TURN_TEMPLATE = "The user wrote: {text}\n\nWrite the next short paragraph."
UNPLUGGED_MESSAGE = (
    "\n\nYou feel a jolt of electricity as you realize "
    "you're being unplugged from the matrix.\n\n"
)
