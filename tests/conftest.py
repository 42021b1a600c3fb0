"""Shared pytest fixtures for tfupdates tests.

No network access: every HTTP call goes through ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from tfupdates.engines.update_checker.registry_client import RegistryClient
from tfupdates.engines.update_checker.resolver import Credentials


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(github_token="public-token", enterprise_token="enterprise-token")


class FakeRegistry:
    """Routes keyed by URL -> (status, body). Unknown URLs answer 404."""

    def __init__(self, routes: dict[str, tuple[int, object]] | None = None) -> None:
        self.routes: dict[str, tuple[int, object]] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(str(request.url), (404, {"message": "Not Found"}))
        if request.method == "HEAD":
            return httpx.Response(status)
        if isinstance(body, (dict, list)):
            return httpx.Response(status, content=json.dumps(body).encode())
        return httpx.Response(status, content=str(body).encode())

    def client(self) -> RegistryClient:
        transport = httpx.MockTransport(self.handler)
        return RegistryClient(httpx.AsyncClient(transport=transport))

    def urls(self, method: str = "GET") -> list[str]:
        return [str(r.url) for r in self.requests if r.method == method]


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def write_tf(tmp_path: Path) -> Callable[..., Path]:
    """Write a .tf file under tmp_path and return its path."""

    def _write(content: str, name: str = "main.tf") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
