"""Artifact classifier — gates which builders' artifacts can be published."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

# Builder id -> supported artifact kind. Read-only at runtime.
BUILTIN_KINDS: Mapping[str, str] = MappingProxyType({
    "mitchellh.amazonebs": "amazonebs",
    "mitchellh.amazon.instance": "amazoninstance",
})


class UnsupportedArtifactTypeError(RuntimeError):
    """Raised when an artifact's producer is not in the classification table.

    This signals a pipeline misconfiguration (the post-processor is attached
    to a builder it cannot handle), not a transient condition.
    """

    def __init__(self, producer_id: str) -> None:
        self.producer_id = producer_id
        super().__init__(f"Unsupported artifact type: {producer_id}")


def classify(
    producer_id: str, table: Mapping[str, str] = BUILTIN_KINDS
) -> str:
    """Return the supported kind for *producer_id*.

    Raises
    ------
    UnsupportedArtifactTypeError
        If *producer_id* is not in *table*.
    """
    try:
        return table[producer_id]
    except KeyError:
        raise UnsupportedArtifactTypeError(producer_id) from None
