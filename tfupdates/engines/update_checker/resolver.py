"""Derive release lookup targets from module sources and provider names."""

from __future__ import annotations

import re
from dataclasses import dataclass

from tfupdates.core.config import Settings

PUBLIC_GITHUB_HOST = "github.com"
PUBLIC_GITHUB_API = "https://api.github.com"
DEFAULT_PROVIDER_OWNER = "hashicorp"

_HOST = r"(?P<host>[A-Za-z0-9._-]+)"
_OWNER = r"(?P<owner>[A-Za-z0-9._-]+)"
_REPO = r"(?P<repo>[A-Za-z0-9._-]+?)"
_SUBDIR = r"(?://[^?]*)?"
_REF = r"\?ref=(?P<ref>[A-Za-z0-9._/-]+)"

# Checked in order; the first match wins.
SOURCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # git@github.com:org/repo.git?ref=v1.2.3
    re.compile(rf"^git@{_HOST}:{_OWNER}/{_REPO}\.git{_SUBDIR}{_REF}$"),
    # git@github.com:org/repo.git
    re.compile(rf"^git@{_HOST}:{_OWNER}/{_REPO}\.git{_SUBDIR}$"),
    # https://github.com/org/repo.git?ref=v1.2.3
    re.compile(rf"^(?:git::)?https://{_HOST}/{_OWNER}/{_REPO}\.git{_SUBDIR}{_REF}$"),
    # https://github.com/org/repo.git
    re.compile(rf"^(?:git::)?https://{_HOST}/{_OWNER}/{_REPO}\.git{_SUBDIR}$"),
    # git::ssh://git@github.com/org/repo.git?ref=v1.2.3
    re.compile(
        rf"^git::ssh://(?:[A-Za-z0-9._-]+@)?{_HOST}/{_OWNER}/{_REPO}\.git{_SUBDIR}(?:{_REF})?$"
    ),
)


@dataclass(frozen=True)
class Credentials:
    """Bearer tokens for github.com and for GitHub Enterprise hosts."""

    github_token: str | None = None
    enterprise_token: str | None = None

    @classmethod
    def from_env(cls) -> Credentials:
        settings = Settings.from_env()
        return cls(
            github_token=settings.github_pat,
            enterprise_token=settings.github_enterprise_pat,
        )


@dataclass(frozen=True)
class SourceReference:
    host: str
    owner: str
    repo: str
    ref_version: str = ""


@dataclass(frozen=True)
class LookupTarget:
    """Where to ask for the latest release, and the ref pinned in config."""

    url: str
    auth_header: str
    ref_version: str

    @property
    def is_resolved(self) -> bool:
        return bool(self.url)


UNRESOLVED = LookupTarget(url="", auth_header="", ref_version="")


def bearer(token: str | None) -> str:
    return f"Bearer {token}" if token else ""


def classify_source(source: str) -> SourceReference | None:
    """Match a module ``source`` against the supported git remote syntaxes.

    Local paths, registry shorthands and anything else return None.
    """
    source = source.strip()
    for pattern in SOURCE_PATTERNS:
        m = pattern.match(source)
        if m:
            return SourceReference(
                host=m.group("host"),
                owner=m.group("owner"),
                repo=m.group("repo"),
                ref_version=m.groupdict().get("ref") or "",
            )
    return None


def resolve_module_source(source: str, credentials: Credentials) -> LookupTarget:
    """Build the ``releases/latest`` lookup for a module source.

    github.com sources go to api.github.com with the public token; every
    other host is treated as GitHub Enterprise (``/api/v3`` on the same host)
    with the enterprise token.
    """
    ref = classify_source(source)
    if ref is None:
        return UNRESOLVED

    if ref.host == PUBLIC_GITHUB_HOST:
        url = f"{PUBLIC_GITHUB_API}/repos/{ref.owner}/{ref.repo}/releases/latest"
        auth_header = bearer(credentials.github_token)
    else:
        url = f"https://{ref.host}/api/v3/repos/{ref.owner}/{ref.repo}/releases/latest"
        auth_header = bearer(credentials.enterprise_token)

    return LookupTarget(url=url, auth_header=auth_header, ref_version=ref.ref_version)


def provider_release_url(name: str, owner: str | None = None) -> str:
    """Release URL of ``terraform-provider-<name>``; owner defaults to hashicorp."""
    owner = owner or DEFAULT_PROVIDER_OWNER
    return f"{PUBLIC_GITHUB_API}/repos/{owner}/terraform-provider-{name}/releases/latest"
