"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

import structlog

log = structlog.get_logger("tfupdates.config")

ENV_GITHUB_PAT = "TFUPDATES_GITHUB_PAT"
ENV_GITHUB_ENTERPRISE_PAT = "TFUPDATES_GITHUB_ENTERPRISE_PAT"
ENV_HTTP_TIMEOUT = "TFUPDATES_HTTP_TIMEOUT"

DEFAULT_HTTP_TIMEOUT = 30.0


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("config.invalid_float", key=key, value=raw, default=default)
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime settings read once from the environment."""

    github_pat: str | None = None
    github_enterprise_pat: str | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            github_pat=os.environ.get(ENV_GITHUB_PAT) or None,
            github_enterprise_pat=os.environ.get(ENV_GITHUB_ENTERPRISE_PAT) or None,
            http_timeout=_env_float(ENV_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT),
        )
