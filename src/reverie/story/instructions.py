"""Loading of the system instructions that frame the story."""

import logging
from pathlib import Path

from ..config import SYSTEM_INSTRUCTIONS_FILE
from ..errors import InstructionsError

logger = logging.getLogger(__name__)


def load_instructions(path: Path | str = SYSTEM_INSTRUCTIONS_FILE) -> str:
    """Read the system instructions file once, as raw bytes.

    Args:
        path: Instructions file (default: ./system-instructions.md)

    Returns:
        File content decoded as UTF-8

    Raises:
        InstructionsError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InstructionsError(f"Error reading file bytes {path}: {e}") from e

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InstructionsError(f"Error decoding {path} as UTF-8: {e}") from e

    logger.debug("Loaded %d bytes of system instructions from %s", len(data), path)
    return text
