"""Command-line interface: the reverie Typer application."""
