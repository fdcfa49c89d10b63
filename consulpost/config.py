"""Process-level settings, env-driven via pydantic-settings.

Two settings groups live here:

* ``Settings`` — how this tool itself behaves (``CONSULPOST_*``).
* ``ConsulDefaults`` — the store's own connection defaults, read from the
  same environment variables the Consul CLI and client libraries honor
  (``CONSUL_HTTP_ADDR``, ``CONSUL_HTTP_TOKEN``, ``CONSUL_HTTP_SSL``, ...).
  Operator configuration only overrides these when a value is non-empty.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONSUL_ADDRESS = "127.0.0.1:8500"


class Settings(BaseSettings):
    """Runtime settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CONSULPOST_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CONSULPOST_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    debug: bool = False


class ConsulDefaults(BaseSettings):
    """Connection defaults for the Consul HTTP API.

    Mirrors the defaults of the official Consul client: a local agent on
    ``127.0.0.1:8500`` over plain HTTP, adjusted by ``CONSUL_HTTP_*``
    environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONSUL_HTTP_",
        extra="ignore",
    )

    addr: str = DEFAULT_CONSUL_ADDRESS
    token: str = ""
    ssl: bool = False
    ssl_verify: bool = True
    ca_file: Path | None = Field(
        default=None,
        validation_alias="CONSUL_CACERT",
    )

    @property
    def scheme(self) -> str:
        """``https`` when ``CONSUL_HTTP_SSL`` is set, else ``http``."""
        return "https" if self.ssl else "http"
