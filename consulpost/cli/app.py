"""Main Typer application — registers all CLI commands.

Entry point: ``consulpost`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from consulpost.cli.commands.publish import publish_cmd
from consulpost.cli.commands.validate import validate_cmd
from consulpost.config import Settings

app = typer.Typer(
    name="consulpost",
    help="Publish build artifact metadata to Consul's key/value store.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure_logging(
    log_level: str = typer.Option(
        None, "--log-level", help="Override CONSULPOST_LOG_LEVEL."
    ),
) -> None:
    settings = Settings()
    level = (log_level or ("DEBUG" if settings.debug else settings.log_level)).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=settings.debug, show_path=False)],
        force=True,
    )


app.command(name="publish", help="Publish an artifact's metadata to Consul.")(publish_cmd)
app.command(name="validate", help="Validate a post-processor configuration.")(validate_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
