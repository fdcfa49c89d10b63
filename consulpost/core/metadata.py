"""Metadata and type resolution for published records.

Both resolvers combine what the artifact reports about itself (through its
``consul.artifact.*`` state keys) with what the operator configured.

State values are decoded through strict pydantic ``TypeAdapter``s. The
shape of these values is a contract with the builder, so a mismatch raises
``ArtifactContractError``, which callers are not expected to handle.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from consulpost.models.artifacts import (
    ARTIFACT_STATE_METADATA,
    ARTIFACT_STATE_TYPE,
    Artifact,
)
from consulpost.models.config import PostProcessorConfig

_METADATA_ADAPTER: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])
_TYPE_ADAPTER: TypeAdapter[str] = TypeAdapter(str)


class ArtifactContractError(RuntimeError):
    """Raised when an artifact's state value has the wrong shape.

    This is a programming error in the builder, not a user-facing
    validation failure.
    """


def _decode(adapter: TypeAdapter[Any], key: str, raw: Any) -> Any:
    try:
        return adapter.validate_python(raw, strict=True)
    except ValidationError as exc:
        raise ArtifactContractError(
            f"Artifact state {key!r} has an unexpected shape: {exc}"
        ) from exc


def embedded_metadata(artifact: Artifact) -> dict[str, str]:
    """Return the artifact's own metadata, or ``{}`` when it has none."""
    raw = artifact.state(ARTIFACT_STATE_METADATA)
    if raw is None:
        return {}
    if isinstance(raw, Mapping) and not isinstance(raw, dict):
        raw = dict(raw)
    return dict(_decode(_METADATA_ADAPTER, ARTIFACT_STATE_METADATA, raw))


def resolve_metadata(
    artifact: Artifact, config: PostProcessorConfig
) -> dict[str, str]:
    """Merge artifact metadata with configured metadata; configured keys win.

    The result is always a fresh dict; the artifact's state is untouched.
    """
    metadata = embedded_metadata(artifact)
    if config.metadata:
        metadata.update(config.metadata)
    return metadata


def resolve_type(artifact: Artifact, config: PostProcessorConfig) -> str:
    """Return the type tag to publish.

    The artifact's own type wins unless ``artifact_type_override`` is set
    or the artifact reports none; then ``config.artifact_type`` is used,
    which may be an empty string.
    """
    if not config.artifact_type_override:
        raw = artifact.state(ARTIFACT_STATE_TYPE)
        if raw is not None:
            return _decode(_TYPE_ADAPTER, ARTIFACT_STATE_TYPE, raw)
    return config.artifact_type
