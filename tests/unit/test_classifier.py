"""Tests for the artifact classifier."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from consulpost.core.classifier import (
    BUILTIN_KINDS,
    UnsupportedArtifactTypeError,
    classify,
)


class TestClassify:
    @pytest.mark.parametrize("producer_id, kind", [
        ("mitchellh.amazonebs", "amazonebs"),
        ("mitchellh.amazon.instance", "amazoninstance"),
    ])
    def test_builtin_kinds(self, producer_id, kind):
        assert classify(producer_id) == kind

    def test_unsupported(self):
        with pytest.raises(UnsupportedArtifactTypeError) as exc_info:
            classify("mitchellh.docker")
        assert exc_info.value.producer_id == "mitchellh.docker"
        assert str(exc_info.value) == "Unsupported artifact type: mitchellh.docker"

    def test_custom_table(self):
        table = MappingProxyType({"example.builder": "example"})
        assert classify("example.builder", table) == "example"
        with pytest.raises(UnsupportedArtifactTypeError):
            classify("mitchellh.amazonebs", table)

    def test_builtin_table_is_read_only(self):
        with pytest.raises(TypeError):
            BUILTIN_KINDS["mitchellh.docker"] = "docker"  # type: ignore[index]
