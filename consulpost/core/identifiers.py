"""Parser for compound, multi-region artifact identifiers.

Builders that copy an image to several regions report one identifier such
as ``us-east-1:ami-111,us-west-2:ami-222``. Each comma-separated unit is a
``region:value`` pair.
"""

from __future__ import annotations

from consulpost.models.records import IdentifierUnit

UNIT_SEPARATOR = ","
PART_SEPARATOR = ":"

# Path segments that would be empty or walk out of the store key space.
INVALID_SEGMENTS = frozenset({"", ".", ".."})


class MalformedIdentifierError(RuntimeError):
    """Raised when any unit of an identifier is not exactly ``region:value``."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Poorly formatted artifact ID: {identifier}")


def _valid_part(part: str) -> bool:
    return not any(s in INVALID_SEGMENTS for s in part.split("/"))


def parse_identifier(identifier: str) -> list[IdentifierUnit]:
    """Split *identifier* into ``IdentifierUnit`` records, in input order.

    The whole identifier is rejected if a single unit is malformed, has an
    empty region or value, or contains a ``.`` or ``..`` path segment; no
    partial result is ever returned. Duplicates are kept.

    Examples
    --------
    >>> [(u.region, u.value) for u in parse_identifier("us-east-1:ami-111")]
    [('us-east-1', 'ami-111')]
    """
    units: list[IdentifierUnit] = []
    for chunk in identifier.split(UNIT_SEPARATOR):
        parts = chunk.split(PART_SEPARATOR)
        if len(parts) != 2 or not all(_valid_part(p) for p in parts):
            raise MalformedIdentifierError(identifier)
        units.append(IdentifierUnit(region=parts[0], value=parts[1]))
    return units
