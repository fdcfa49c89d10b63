"""Identifier units and published records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class IdentifierUnit(BaseModel):
    """One ``region:value`` pair taken from a compound artifact identifier."""

    model_config = ConfigDict(frozen=True)

    region: str
    value: str


class PublishedRecord(BaseModel):
    """A single key/value write destined for the store.

    Built fresh for every publish call and never persisted locally; the
    store is the only place a record lives.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: bytes
    region: str
    unit_value: str
    artifact_type: str = ""
    digest: str = ""  # "sha256:<hex>" of value
