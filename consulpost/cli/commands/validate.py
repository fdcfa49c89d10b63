"""``consulpost validate`` — resolve a configuration without publishing."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from consulpost.cli._inputs import load_json_mapping, parse_vars
from consulpost.core.config_resolver import (
    ConfigError,
    ConfigValidationError,
    resolve_config,
)

console = Console()


def validate_cmd(
    config_files: list[Path] = typer.Option(
        ..., "--config", "-c", help="JSON configuration file (repeatable)."
    ),
    var: list[str] = typer.Option(
        None, "--var", help="User variable as NAME=VALUE (repeatable)."
    ),
    var_file: Path = typer.Option(
        None, "--var-file", help="JSON file of user variables."
    ),
) -> None:
    """Decode, expand and validate the post-processor configuration."""
    raws = [load_json_mapping(p) for p in config_files]
    variables = parse_vars(var, var_file) if (var or var_file) else None

    try:
        config = resolve_config(*raws, user_variables=variables)
    except ConfigValidationError as exc:
        console.print("[bold red]Configuration is invalid:[/bold red]")
        for error in exc.errors:
            console.print(f"  - {escape(error)}")
        raise typer.Exit(code=1)
    except ConfigError as exc:
        console.print(f"[bold red]Configuration is invalid:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    table = Table(title="Resolved configuration")
    table.add_column("Option", style="cyan")
    table.add_column("Value")
    table.add_row("address", escape(config.address))
    table.add_row("scheme", escape(config.scheme) or "[dim]default[/dim]")
    table.add_row("datacenter", escape(config.datacenter) or "[dim]default[/dim]")
    table.add_row("token", "[dim]set[/dim]" if config.token else "[dim]default[/dim]")
    table.add_row("key_prefix", escape(config.key_prefix) or "[dim]none[/dim]")
    table.add_row("artifact_type", escape(config.artifact_type) or "[dim]none[/dim]")
    table.add_row("artifact_type_override", str(config.artifact_type_override))
    metadata = ", ".join(
        f"{k}={v}" for k, v in sorted((config.metadata or {}).items())
    )
    table.add_row("metadata", escape(metadata))
    console.print(table)
    console.print("[bold green]Configuration is valid.[/bold green]")
