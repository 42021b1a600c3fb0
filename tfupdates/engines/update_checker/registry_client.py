"""Async client for the release and checkpoint endpoints."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from tfupdates.core.config import DEFAULT_HTTP_TIMEOUT
from tfupdates.exceptions import FetchError

log = structlog.get_logger("tfupdates.engine")

CHECKPOINT_URL = "https://checkpoint-api.hashicorp.com/v1/check/terraform"

# Prepended to the checkpoint version so it reads like a declared constraint.
COMPATIBLE_OPERATOR = "~>"

_DEFAULT_HEADERS = {
    "Accept": "application/vnd.github+json",
    "User-Agent": "tfupdates",
}


class RegistryClient:
    """Thin async wrapper around httpx for "latest version" lookups.

    One request per call; failures are raised as :class:`FetchError` and
    never retried.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get_json(self, url: str, auth_header: str = "") -> dict[str, Any]:
        """GET *url* and return the decoded JSON object."""
        try:
            resp = await self._client.get(url, headers=self._headers(auth_header))
        except httpx.HTTPError as exc:
            log.warning("registry.request_failed", url=url, error=str(exc))
            raise FetchError(url, f"request failed: {exc}") from exc

        if not resp.is_success:
            log.warning("registry.bad_status", url=url, status=resp.status_code)
            raise FetchError(url, f"HTTP {resp.status_code}", status=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise FetchError(url, "response is not JSON", status=resp.status_code) from exc
        if not isinstance(data, dict):
            raise FetchError(url, "response is not a JSON object", status=resp.status_code)
        return data

    async def url_exists(self, url: str, auth_header: str = "") -> bool:
        """Lightweight HEAD check; any non-2xx or transport error counts as missing."""
        try:
            resp = await self._client.head(url, headers=self._headers(auth_header))
        except httpx.HTTPError as exc:
            log.debug("registry.head_failed", url=url, error=str(exc))
            return False
        return resp.is_success

    async def fetch_terraform_version(self) -> str:
        """Current Terraform release from the checkpoint API, e.g. ``~> 1.9.5``."""
        data = await self.get_json(CHECKPOINT_URL)
        current = data.get("current_version")
        if not current:
            raise FetchError(CHECKPOINT_URL, "missing current_version")
        return f"{COMPATIBLE_OPERATOR} {current}"

    async def fetch_release_version(
        self,
        url: str,
        auth_header: str = "",
        *,
        strip_v: bool = False,
    ) -> str:
        """``tag_name`` of a GitHub ``releases/latest`` response.

        Providers tag as ``v5.1.0`` and pass ``strip_v=True``; module tags are
        returned unchanged.
        """
        data = await self.get_json(url, auth_header)
        tag = data.get("tag_name")
        if not tag:
            raise FetchError(url, "missing tag_name")
        if strip_v and tag.startswith("v"):
            tag = tag[1:]
        return tag

    # ── internal ───────────────────────────────────────────────────────────

    @staticmethod
    def _headers(auth_header: str) -> dict[str, str]:
        headers = dict(_DEFAULT_HEADERS)
        if auth_header:
            headers["Authorization"] = auth_header
        return headers
