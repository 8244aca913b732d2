"""Provider factory functions for CLI.

Centralizes creation of the LLM provider from environment variables.
Hides configuration details from command implementations.
"""

import os

from ..config import API_KEY_ENV, API_KEY_FALLBACK_ENV, API_KEY_HELP_URL, DEFAULT_MODEL, MODEL_ENV
from ..errors import ConfigurationError
from ..llm import LLMProvider, create_llm_provider


def get_api_key() -> str | None:
    """Return the API credential, preferring API_KEY over GEMINI_API_KEY."""
    return os.getenv(API_KEY_ENV) or os.getenv(API_KEY_FALLBACK_ENV)


def get_llm(model: str | None = None) -> LLMProvider:
    """Create the Gemini provider from environment variables.

    Args:
        model: Model override (default: GEMINI_MODEL or gemini-2.5-flash)

    Returns:
        LLM provider instance

    Raises:
        ConfigurationError: If no API key is set

    Environment variables:
        API_KEY: Google AI API key (required)
        GEMINI_API_KEY: Used when API_KEY is not set
        GEMINI_MODEL: Model name (default: gemini-2.5-flash)
    """
    api_key = get_api_key()
    if not api_key:
        raise ConfigurationError(
            f"Environment variable {API_KEY_ENV} is not set.\n"
            f"To obtain an API key, visit {API_KEY_HELP_URL}, select 'Get API key'."
        )

    return create_llm_provider(
        "gemini",
        api_key=api_key,
        model=model or os.getenv(MODEL_ENV, DEFAULT_MODEL),
    )
