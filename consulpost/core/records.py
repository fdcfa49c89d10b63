"""Record construction: deterministic keys and canonical values."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from consulpost.core.hasher import canonical_json_bytes, content_address
from consulpost.models.records import IdentifierUnit, PublishedRecord

KEY_SEPARATOR = "/"


def record_key(
    unit: IdentifierUnit, *, artifact_type: str = "", key_prefix: str = ""
) -> str:
    """Derive the store key for one identifier unit.

    Non-empty segments ``key_prefix / artifact_type / region / value`` are
    joined with ``/``. The same inputs always give the same key, so
    re-publishing overwrites rather than duplicates.
    """
    segments = [
        key_prefix.strip(KEY_SEPARATOR),
        artifact_type,
        unit.region,
        unit.value,
    ]
    return KEY_SEPARATOR.join(s for s in segments if s)


def build_records(
    units: Iterable[IdentifierUnit],
    metadata: Mapping[str, str],
    *,
    artifact_type: str = "",
    key_prefix: str = "",
) -> list[PublishedRecord]:
    """Build one ``PublishedRecord`` per unit, preserving unit order."""
    value = canonical_json_bytes(dict(metadata))
    digest = content_address(value)
    return [
        PublishedRecord(
            key=record_key(unit, artifact_type=artifact_type, key_prefix=key_prefix),
            value=value,
            region=unit.region,
            unit_value=unit.value,
            artifact_type=artifact_type,
            digest=digest,
        )
        for unit in units
    ]
