"""Build artifact contract consumed by the post-processor.

The post-processor only ever reads an artifact: its producer (builder) id,
its compound identifier, and values from its opaque key-addressed state.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

# Artifacts can return a string for this state key and the post-processor
# uses it as the published type, unless ``artifact_type_override`` is set.
ARTIFACT_STATE_TYPE = "consul.artifact.type"

# Artifacts can return a str -> str mapping for this state key; it is merged
# into the metadata of every published record.
ARTIFACT_STATE_METADATA = "consul.artifact.metadata"


@runtime_checkable
class Artifact(Protocol):
    """Protocol every build artifact handed to the post-processor implements."""

    @property
    def producer_id(self) -> str:
        """Identity of the builder that created the artifact."""
        ...

    @property
    def identifier(self) -> str:
        """Compound identifier, e.g. ``us-east-1:ami-111,us-west-2:ami-222``."""
        ...

    def state(self, key: str) -> Any | None:
        """Return the state value stored under *key*, or ``None``."""
        ...


class BuildArtifact(BaseModel):
    """A plain, immutable artifact record.

    Used when the artifact arrives as data (CLI, tests, or a runner that
    serializes artifacts) rather than as a live builder object.

    Examples
    --------
    >>> artifact = BuildArtifact(
    ...     producer_id="mitchellh.amazonebs",
    ...     identifier="us-east-1:ami-0001",
    ...     state_data={"consul.artifact.type": "ami"},
    ... )
    >>> artifact.state("consul.artifact.type")
    'ami'
    """

    model_config = ConfigDict(frozen=True)

    producer_id: str
    identifier: str
    state_data: dict[str, Any] = Field(default_factory=dict)

    def state(self, key: str) -> Any | None:
        return self.state_data.get(key)

    def __str__(self) -> str:
        return f"{self.producer_id} artifact {self.identifier}"
