"""Main CLI application using Typer."""
import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..config import (
    API_KEY_ENV,
    CHARACTER_DELAY,
    SENTENCE_DELAY,
    SYSTEM_INSTRUCTIONS_FILE,
    WRAP_COLUMN,
    LogLevel,
)
from ..errors import ReverieError, StreamError
from ..render import TimingPolicy, TypewriterRenderer
from ..story import StoryDriver, StorySession, load_instructions
from .providers import get_api_key, get_llm

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="reverie",
    help="Dream up an interactive story with a generative model, told typewriter-style",
    no_args_is_help=True,
    add_completion=True,
)

# Console for story output
console = Console()


def configure_logging(level: str) -> None:
    """Send logs to stderr through rich, away from the story on stdout."""
    logging.basicConfig(
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("reverie").setLevel(LogLevel.from_string(level))


@app.command()
def play(
    instructions: Path = typer.Option(
        Path(SYSTEM_INSTRUCTIONS_FILE),
        "--instructions",
        "-i",
        help="System instructions file that frames the story"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Gemini model (default: GEMINI_MODEL or gemini-2.5-flash)"
    ),
    char_delay: float = typer.Option(
        CHARACTER_DELAY,
        "--char-delay",
        min=0.0,
        help="Pause after every character, in seconds"
    ),
    sentence_delay: float = typer.Option(
        SENTENCE_DELAY,
        "--sentence-delay",
        min=0.0,
        help="Extra pause after every period, in seconds"
    ),
    wrap_column: int = typer.Option(
        WRAP_COLUMN,
        "--wrap-column",
        min=1,
        help="Break the line at the first space past this column"
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Log level on stderr: debug, info, warning, or error"
    ),
):
    """Start dreaming: answer the opening question, then steer the story."""
    configure_logging(log_level)

    async def _play():
        renderer = TypewriterRenderer(
            console=console,
            timing=TimingPolicy(character=char_delay, sentence=sentence_delay),
            wrap_column=wrap_column,
        )
        driver = None
        llm = None

        try:
            llm = get_llm(model)
            session = StorySession(llm, load_instructions(instructions))
            driver = StoryDriver(session, renderer, read_line=console.input)
            await driver.play()

        except StreamError as e:
            await driver.report_failure(e)
            raise typer.Exit(code=1)
        except ReverieError as e:
            logger.debug("Fatal session error", exc_info=e)
            console.print(f"\n[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        finally:
            if llm:
                await llm.close()

    try:
        asyncio.run(_play())
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")


@app.command()
def check(
    instructions: Path = typer.Option(
        Path(SYSTEM_INSTRUCTIONS_FILE),
        "--instructions",
        "-i",
        help="System instructions file that frames the story"
    ),
):
    """Check that the API key and the instructions file are in place."""
    all_healthy = True

    if get_api_key():
        console.print(f"[green]+[/green] {API_KEY_ENV}: SET")
    else:
        console.print(f"[red]x[/red] {API_KEY_ENV}: NOT SET")
        all_healthy = False

    try:
        text = load_instructions(instructions)
        console.print(f"[green]+[/green] Instructions: {escape(str(instructions))} ({len(text)} characters)")
    except ReverieError as e:
        console.print(f"[red]x[/red] Instructions: FAILED ({escape(str(e))})")
        all_healthy = False

    if not all_healthy:
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
