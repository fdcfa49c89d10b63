"""Consul post-processor — publishes artifact metadata to Consul KV.

Lifecycle per instance:

    configure(raws...)          resolve config -> connect store client
    post_process(ui, artifact)  classify -> parse id -> resolve metadata/type
                                -> put one record per unit, in order

``post_process`` is a sink: it returns the artifact it was given, unchanged,
with ``keep_original=False``. Records are written one at a time and the
first store failure aborts the call; records already written stay written,
and because keys are deterministic a re-run simply overwrites them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from consulpost.config import ConsulDefaults
from consulpost.core.classifier import BUILTIN_KINDS, classify
from consulpost.core.config_resolver import resolve_config
from consulpost.core.identifiers import parse_identifier
from consulpost.core.metadata import resolve_metadata, resolve_type
from consulpost.core.records import build_records
from consulpost.core.store import ConsulKVClient, StoreError, connect
from consulpost.models.artifacts import Artifact
from consulpost.models.config import PostProcessorConfig
from consulpost.models.records import PublishedRecord
from consulpost.ui import Ui

logger = logging.getLogger(__name__)


class PostProcessorNotConfiguredError(RuntimeError):
    """Raised when ``post_process`` runs before a successful ``configure``."""


class ConsulPostProcessor:
    """Publishes one Consul KV record per unit of a build artifact's id.

    Parameters
    ----------
    defaults:
        Store connection defaults. Read from ``CONSUL_HTTP_*`` when omitted.
    transport:
        Optional ``httpx`` transport handed to the store client.
    classification:
        Builder id -> kind table. Defaults to ``BUILTIN_KINDS``.

    Usage
    -----
    >>> pp = ConsulPostProcessor()
    >>> pp.configure({"address": "consul.local:8500", "metadata": {"build": "42"}})
    >>> artifact, keep = pp.post_process(ui, artifact)
    """

    def __init__(
        self,
        *,
        defaults: ConsulDefaults | None = None,
        transport: httpx.BaseTransport | None = None,
        classification: Mapping[str, str] = BUILTIN_KINDS,
    ) -> None:
        self._defaults = defaults
        self._transport = transport
        self._classification = classification
        self.config: PostProcessorConfig | None = None
        self._client: ConsulKVClient | None = None

    @property
    def configured(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> ConsulKVClient:
        if self._client is None:
            raise PostProcessorNotConfiguredError(
                "Post-processor is not configured; call configure() first"
            )
        return self._client

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(
        self,
        *raws: Mapping[str, Any] | None,
        user_variables: Mapping[str, str] | None = None,
    ) -> None:
        """Resolve configuration and build the store client.

        On any failure the instance is left unconfigured and the error
        (``ConfigError`` or ``ConnectError``) propagates.
        """
        self.close()
        self.config = None

        config = resolve_config(*raws, user_variables=user_variables)
        client = connect(config, defaults=self._defaults, transport=self._transport)

        self.config = config
        self._client = client

    def close(self) -> None:
        """Release the store client, if any."""
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Post-processing
    # ------------------------------------------------------------------

    def plan(self, artifact: Artifact) -> list[PublishedRecord]:
        """Compute the records *artifact* would publish, without writing.

        Raises ``UnsupportedArtifactTypeError`` or
        ``MalformedIdentifierError`` before any store interaction.
        """
        config = self._require_config()
        kind = classify(artifact.producer_id, self._classification)
        units = parse_identifier(artifact.identifier)

        metadata = resolve_metadata(artifact, config)
        artifact_type = resolve_type(artifact, config)
        logger.debug(
            "Artifact %s classified as %s: %d unit(s), type=%r, %d metadata key(s)",
            artifact.identifier,
            kind,
            len(units),
            artifact_type,
            len(metadata),
        )
        return build_records(
            units,
            metadata,
            artifact_type=artifact_type,
            key_prefix=config.key_prefix,
        )

    def post_process(self, ui: Ui, artifact: Artifact) -> tuple[Artifact, bool]:
        """Publish *artifact*'s records and return ``(artifact, False)``.

        Raises
        ------
        PostProcessorNotConfiguredError
            If ``configure`` has not succeeded.
        UnsupportedArtifactTypeError
            If the artifact's builder is not supported. Nothing is written.
        MalformedIdentifierError
            If the artifact id cannot be parsed. Nothing is written.
        StoreError
            On the first failed write; later records are not attempted.
        """
        client = self.client
        records = self.plan(artifact)

        ui.say(
            f"Publishing {len(records)} artifact record(s) for "
            f"{artifact.identifier} to Consul"
        )
        for record in records:
            ui.message(f"{record.region}: {record.unit_value} -> {record.key}")
            try:
                client.put(record.key, record.value)
            except StoreError:
                logger.error(
                    "Publishing %s failed at key %s", artifact.identifier, record.key
                )
                raise
            logger.info("Published %s (%s)", record.key, record.digest[:19])

        return artifact, False

    def _require_config(self) -> PostProcessorConfig:
        if self.config is None:
            raise PostProcessorNotConfiguredError(
                "Post-processor is not configured; call configure() first"
            )
        return self.config
