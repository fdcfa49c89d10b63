"""consulpost data models — Pydantic v2, frozen."""

from consulpost.models.artifacts import (
    ARTIFACT_STATE_METADATA,
    ARTIFACT_STATE_TYPE,
    Artifact,
    BuildArtifact,
)
from consulpost.models.config import (
    REQUIRED_FIELDS,
    TEMPLATED_FIELDS,
    PostProcessorConfig,
)
from consulpost.models.records import IdentifierUnit, PublishedRecord

__all__ = [
    # artifacts
    "ARTIFACT_STATE_METADATA",
    "ARTIFACT_STATE_TYPE",
    "Artifact",
    "BuildArtifact",
    # config
    "PostProcessorConfig",
    "REQUIRED_FIELDS",
    "TEMPLATED_FIELDS",
    # records
    "IdentifierUnit",
    "PublishedRecord",
]
