"""Shared test fixtures for consulpost."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from consulpost.config import ConsulDefaults
from consulpost.core.post_processor import ConsulPostProcessor
from consulpost.models.artifacts import BuildArtifact
from consulpost.ui import BufferedUi

KV_PREFIX = "/v1/kv/"


class FakeConsulKV:
    """In-memory stand-in for a Consul agent's ``/v1/kv`` endpoint.

    Served through ``httpx.MockTransport``. Every request is recorded.
    Keys listed in ``fail_keys`` answer HTTP 500, keys in ``reject_keys``
    answer ``false``, keys in ``unreachable_keys`` raise a connect error.
    """

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self.fail_keys: set[str] = set()
        self.reject_keys: set[str] = set()
        self.unreachable_keys: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if not path.startswith(KV_PREFIX):
            return httpx.Response(404, text="not found")
        key = path[len(KV_PREFIX):]

        if key in self.unreachable_keys:
            raise httpx.ConnectError("connection refused", request=request)
        if request.method == "PUT":
            if key in self.fail_keys:
                return httpx.Response(500, text="rpc error: leader unavailable")
            if key in self.reject_keys:
                return httpx.Response(200, text="false")
            self.data[key] = request.content
            return httpx.Response(200, text="true")
        if request.method == "GET":
            if key not in self.data:
                return httpx.Response(404)
            return httpx.Response(200, content=self.data[key])
        return httpx.Response(405)

    @property
    def puts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PUT"]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's Consul and consulpost env out of tests."""
    for name in (
        "CONSUL_HTTP_ADDR",
        "CONSUL_HTTP_TOKEN",
        "CONSUL_HTTP_SSL",
        "CONSUL_HTTP_SSL_VERIFY",
        "CONSUL_CACERT",
        "CONSULPOST_LOG_LEVEL",
        "CONSULPOST_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_kv() -> FakeConsulKV:
    """Provide an empty fake Consul KV."""
    return FakeConsulKV()


@pytest.fixture
def defaults() -> ConsulDefaults:
    """Provide store defaults unaffected by the environment."""
    return ConsulDefaults()


@pytest.fixture
def ui() -> BufferedUi:
    """Provide a UI that collects progress lines."""
    return BufferedUi()


@pytest.fixture
def make_artifact() -> Callable[..., BuildArtifact]:
    """Factory fixture: build a BuildArtifact with sensible defaults."""

    def _factory(
        identifier: str = "us-east-1:ami-0001",
        producer_id: str = "mitchellh.amazonebs",
        state_data: dict[str, Any] | None = None,
    ) -> BuildArtifact:
        return BuildArtifact(
            producer_id=producer_id,
            identifier=identifier,
            state_data=state_data or {},
        )

    return _factory


@pytest.fixture
def make_post_processor(
    fake_kv: FakeConsulKV, defaults: ConsulDefaults
) -> Callable[..., ConsulPostProcessor]:
    """Factory fixture: a post-processor configured against ``fake_kv``."""

    def _factory(**raw: Any) -> ConsulPostProcessor:
        config: dict[str, Any] = {"address": "consul.test:8500"}
        config.update(raw)
        pp = ConsulPostProcessor(defaults=defaults, transport=fake_kv.transport)
        pp.configure(config)
        return pp

    return _factory
