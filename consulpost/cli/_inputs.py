"""Shared input loading for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer


def load_json_mapping(path: Path) -> dict[str, Any]:
    """Read a JSON object from *path*, failing the command on bad input."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path}: expected a JSON object")
    return data


def parse_vars(pairs: list[str] | None, var_file: Path | None = None) -> dict[str, str]:
    """Build the user-variable mapping from ``--var-file`` and ``--var k=v``.

    Command-line pairs win over the file.
    """
    variables: dict[str, str] = {}
    if var_file is not None:
        variables.update({k: str(v) for k, v in load_json_mapping(var_file).items()})
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"expected NAME=VALUE, got {pair!r}")
        variables[name] = value
    return variables
