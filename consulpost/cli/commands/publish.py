"""``consulpost publish`` — publish one artifact's metadata to Consul.

Runs the post-processor outside a pipeline runner, for manual re-publishing
or debugging. The artifact is described by its builder id, its id, and an
optional JSON file of state values.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from consulpost.cli._inputs import load_json_mapping, parse_vars
from consulpost.core.classifier import UnsupportedArtifactTypeError
from consulpost.core.config_resolver import ConfigError, ConfigValidationError
from consulpost.core.identifiers import MalformedIdentifierError
from consulpost.core.post_processor import ConsulPostProcessor
from consulpost.core.store import ConnectError, StoreError
from consulpost.models.artifacts import BuildArtifact
from consulpost.ui import ConsoleUi

console = Console()


def publish_cmd(
    builder_id: str = typer.Option(
        ..., "--builder-id", "-b", help="Id of the builder that produced the artifact."
    ),
    artifact_id: str = typer.Option(
        ..., "--artifact-id", "-a", help="Artifact id, e.g. us-east-1:ami-111,us-west-2:ami-222."
    ),
    config_files: list[Path] = typer.Option(
        ..., "--config", "-c", help="JSON configuration file (repeatable)."
    ),
    state_file: Path = typer.Option(
        None, "--state", "-s", help="JSON file of artifact state values."
    ),
    var: list[str] = typer.Option(
        None, "--var", help="User variable as NAME=VALUE (repeatable)."
    ),
    var_file: Path = typer.Option(
        None, "--var-file", help="JSON file of user variables."
    ),
) -> None:
    """Publish artifact metadata records to Consul."""
    raws = [load_json_mapping(p) for p in config_files]
    variables = parse_vars(var, var_file) if (var or var_file) else None
    artifact = BuildArtifact(
        producer_id=builder_id,
        identifier=artifact_id,
        state_data=load_json_mapping(state_file) if state_file else {},
    )
    ui = ConsoleUi(console=console)

    post_processor = ConsulPostProcessor()
    try:
        post_processor.configure(*raws, user_variables=variables)
        post_processor.post_process(ui, artifact)
    except ConfigValidationError as exc:
        for error in exc.errors:
            ui.error(error)
        raise typer.Exit(code=1)
    except (
        ConfigError,
        ConnectError,
        UnsupportedArtifactTypeError,
        MalformedIdentifierError,
        StoreError,
    ) as exc:
        ui.error(str(exc))
        raise typer.Exit(code=1)
    finally:
        post_processor.close()

    ui.say("Done.")
