"""Consul key/value store adapter over the HTTP API (``/v1/kv``).

``connect()`` turns a resolved ``PostProcessorConfig`` into a ready client.
Connection settings start from the store's own defaults (``ConsulDefaults``,
env-driven like the official Consul clients) and are overridden only by
configuration values that are non-empty.

The client is synchronous and holds one ``httpx.Client`` for its lifetime;
it is built once per post-processor and reused across publish calls.
"""

from __future__ import annotations

import logging
import ssl
from pathlib import Path
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from consulpost.config import ConsulDefaults
from consulpost.models.config import PostProcessorConfig

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")
TOKEN_HEADER = "X-Consul-Token"
KV_ENDPOINT = "/v1/kv/"


class ConnectError(RuntimeError):
    """Raised when a store client cannot be constructed."""


class StoreError(RuntimeError):
    """Raised when a read or write against the store fails."""


class ConnectionSettings(BaseModel):
    """Effective connection settings after defaults and overrides."""

    model_config = ConfigDict(frozen=True)

    address: str
    scheme: str = "http"
    datacenter: str = ""
    token: str = Field(default="", repr=False)
    ssl_verify: bool = True
    ca_file: Path | None = None

    @classmethod
    def from_defaults(cls, defaults: ConsulDefaults) -> ConnectionSettings:
        return cls(
            address=defaults.addr,
            scheme=defaults.scheme,
            token=defaults.token,
            ssl_verify=defaults.ssl_verify,
            ca_file=defaults.ca_file,
        )

    def with_overrides(self, config: PostProcessorConfig) -> ConnectionSettings:
        """Apply non-empty ``address``/``scheme``/``datacenter``/``token``.

        An empty configured value keeps the default; it never blanks it.
        """
        overrides = {
            name: getattr(config, name)
            for name in ("address", "scheme", "datacenter", "token")
            if getattr(config, name)
        }
        return self.model_copy(update=overrides)


class ConsulKVClient:
    """Thin client for Consul's key/value endpoint.

    Parameters
    ----------
    http:
        A configured ``httpx.Client`` whose ``base_url`` points at the agent.
    datacenter:
        Datacenter passed as ``?dc=`` on every request; empty means the
        agent's own datacenter.
    """

    def __init__(self, http: httpx.Client, *, datacenter: str = "") -> None:
        self._http = http
        self._datacenter = datacenter

    @property
    def base_url(self) -> str:
        return str(self._http.base_url).rstrip("/")

    @property
    def datacenter(self) -> str:
        return self._datacenter

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _kv_path(key: str) -> str:
        key = key.lstrip("/")
        if not key:
            raise StoreError("Store key must not be empty")
        if any(segment in (".", "..") for segment in key.split("/")):
            raise StoreError(f"Store key {key!r} contains a relative path segment")
        return KV_ENDPOINT + quote(key, safe="/")

    def _params(self, **extra: str) -> dict[str, str]:
        params = dict(extra)
        if self._datacenter:
            params["dc"] = self._datacenter
        return params

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def put(self, key: str, value: bytes) -> None:
        """Write *value* under *key*, overwriting any existing value.

        Raises
        ------
        StoreError
            On transport failure, a non-2xx response, or when the agent
            answers ``false``.
        """
        path = self._kv_path(key)
        try:
            response = self._http.put(path, content=value, params=self._params())
        except httpx.HTTPError as exc:
            raise StoreError(f"Error writing key {key!r}: {exc}") from exc

        if not response.is_success:
            raise StoreError(
                f"Unexpected response code {response.status_code} writing "
                f"key {key!r}: {response.text.strip()}"
            )
        if response.text.strip() != "true":
            raise StoreError(f"Store rejected write of key {key!r}")

        logger.debug("PUT %s (%d bytes)", key, len(value))

    def get(self, key: str) -> bytes | None:
        """Return the raw value stored under *key*, or ``None`` if absent."""
        path = self._kv_path(key)
        try:
            response = self._http.get(path, params=self._params(raw=""))
        except httpx.HTTPError as exc:
            raise StoreError(f"Error reading key {key!r}: {exc}") from exc

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise StoreError(
                f"Unexpected response code {response.status_code} reading "
                f"key {key!r}: {response.text.strip()}"
            )
        return response.content

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ConsulKVClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        dc = f" dc={self._datacenter!r}" if self._datacenter else ""
        return f"<ConsulKVClient {self.base_url}{dc}>"


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def _split_address(settings: ConnectionSettings) -> tuple[str, str, str | None]:
    """Return ``(scheme, host_port, unix_socket_path)`` for *settings*.

    Like the official client, an address may carry its own ``http://``,
    ``https://`` or ``unix://`` prefix, which takes precedence over the
    configured scheme.
    """
    scheme, address = settings.scheme, settings.address
    if "://" in address:
        prefix, address = address.split("://", 1)
        if prefix == "unix":
            return scheme, "localhost", address
        if prefix not in SUPPORTED_SCHEMES:
            raise ConnectError(f"Unknown protocol scheme: {prefix}")
        scheme = prefix

    if scheme not in SUPPORTED_SCHEMES:
        raise ConnectError(f"Unknown protocol scheme: {scheme}")
    return scheme, address, None


def _build_verify(settings: ConnectionSettings) -> ssl.SSLContext | bool:
    if not settings.ssl_verify:
        return False
    try:
        if settings.ca_file is not None:
            return ssl.create_default_context(cafile=str(settings.ca_file))
        return ssl.create_default_context()
    except (OSError, ssl.SSLError) as exc:
        raise ConnectError(f"Error setting up TLS: {exc}") from exc


def connect(
    config: PostProcessorConfig,
    *,
    defaults: ConsulDefaults | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ConsulKVClient:
    """Build a ``ConsulKVClient`` from a resolved configuration.

    Parameters
    ----------
    config:
        Resolved post-processor configuration.
    defaults:
        Store defaults; read from the environment when omitted.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.

    Raises
    ------
    ConnectError
        For an unknown scheme, a malformed address, or a TLS setup failure.
        Never retried.
    """
    settings = ConnectionSettings.from_defaults(
        defaults or ConsulDefaults()
    ).with_overrides(config)
    scheme, host_port, unix_socket = _split_address(settings)

    try:
        base_url = httpx.URL(f"{scheme}://{host_port}")
    except httpx.InvalidURL as exc:
        raise ConnectError(f"Malformed address {settings.address!r}: {exc}") from exc
    if not base_url.host or base_url.path not in ("", "/") or base_url.query:
        raise ConnectError(f"Malformed address {settings.address!r}")

    verify: ssl.SSLContext | bool = True
    if scheme == "https":
        verify = _build_verify(settings)

    if transport is None and unix_socket is not None:
        transport = httpx.HTTPTransport(uds=unix_socket, verify=verify)

    headers = {TOKEN_HEADER: settings.token} if settings.token else {}
    http = httpx.Client(
        base_url=base_url,
        headers=headers,
        verify=verify,
        transport=transport,
    )
    logger.info(
        "Consul client configured for %s%s",
        unix_socket or base_url,
        f" (dc={settings.datacenter})" if settings.datacenter else "",
    )
    return ConsulKVClient(http, datacenter=settings.datacenter)
