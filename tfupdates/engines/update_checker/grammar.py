"""Pattern matchers for terraform, required_providers and module declarations.

These do not parse HCL. Each matcher drops comments, then scans the file
text for the one fragment it needs and keeps no state between calls.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

# terraform { ... required_version = "~> 1.5.0" ... }
TERRAFORM_PATTERN = re.compile(
    r"\bterraform\s*\{[\s\S]*?required_version\s*=\s*\"(?P<ref_version>[^\"]+?)\""
)

# required_providers { <entries> }; entries may nest one level of braces.
REQUIRED_PROVIDERS_PATTERN = re.compile(
    r"\brequired_providers\s*\{(?P<body>(?:[^{}]|\{[^{}]*\})*)\}"
)

# aws = { source = "hashicorp/aws" version = "5.0.0" }
PROVIDER_ENTRY_PATTERN = re.compile(
    r"(?P<alias>[A-Za-z_][\w-]*)\s*=\s*(?:\{(?P<attrs>[^{}]*)\}|\"(?P<shorthand>[^\"]*)\")"
)
PROVIDER_SOURCE_PATTERN = re.compile(r"\bsource\s*=\s*\"(?P<source>[^\"]*)\"")
PROVIDER_VERSION_PATTERN = re.compile(r"\bversion\s*=\s*\"(?P<version>[^\"]*)\"")

# module "vpc" { ... source = "git@github.com:org/repo.git?ref=v1.0.0" ... }
MODULE_PATTERN = re.compile(
    r"\bmodule\s*\"(?P<name>[^\"]*)\"\s*\{[\s\S]*?\bsource\s*=\s*\"(?P<source>[^\"]*)\""
)

# Quoted strings are matched first so "https://..." and "a#b" survive.
_COMMENT_PATTERN = re.compile(
    r"(?P<string>\"(?:[^\"\\\n]|\\.)*\")|/\*[\s\S]*?\*/|(?:#|//)[^\n]*"
)


@dataclass(frozen=True)
class TerraformDeclaration:
    ref_version: str


@dataclass(frozen=True)
class ProviderDeclaration:
    alias: str
    owner: str | None = None
    name: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class ModuleDeclaration:
    name: str
    source: str


def strip_comments(text: str) -> str:
    """Remove ``#``, ``//`` and ``/* */`` comments outside quoted strings.

    Block comments become a single space so neighbouring tokens stay apart.
    """
    return _COMMENT_PATTERN.sub(_replace_comment, text)


def _replace_comment(m: re.Match[str]) -> str:
    if m.group("string") is not None:
        return m.group("string")
    return " " if m.group(0).startswith("/*") else ""


def find_terraform_block(text: str) -> TerraformDeclaration | None:
    """Return the raw ``required_version`` constraint of the terraform block."""
    m = TERRAFORM_PATTERN.search(strip_comments(text))
    if m is None:
        return None
    return TerraformDeclaration(ref_version=m.group("ref_version"))


def _split_source(source: str) -> tuple[str | None, str | None]:
    """Split ``[host/]owner/name`` into (owner, name)."""
    parts = [p for p in source.strip().split("/") if p]
    if len(parts) >= 2:
        return parts[-2], parts[-1]
    if len(parts) == 1:
        return None, parts[0]
    return None, None


def find_required_providers(text: str) -> list[ProviderDeclaration]:
    """Return every provider entry of the first ``required_providers`` block.

    Entries keep their order of appearance. ``source`` and ``version`` may
    come in either order and each may be missing. The pre-0.13 shorthand
    ``aws = "~> 3.0.0"`` yields an entry with only a version.
    """
    block = REQUIRED_PROVIDERS_PATTERN.search(strip_comments(text))
    if block is None:
        return []

    body = block.group("body")
    providers: list[ProviderDeclaration] = []
    for entry in PROVIDER_ENTRY_PATTERN.finditer(body):
        alias = entry.group("alias")
        if entry.group("attrs") is None:
            providers.append(
                ProviderDeclaration(alias=alias, version=entry.group("shorthand").strip())
            )
            continue

        attrs = entry.group("attrs")
        owner = name = version = None
        source_m = PROVIDER_SOURCE_PATTERN.search(attrs)
        if source_m:
            owner, name = _split_source(source_m.group("source"))
        version_m = PROVIDER_VERSION_PATTERN.search(attrs)
        if version_m:
            version = version_m.group("version").strip()
        providers.append(
            ProviderDeclaration(alias=alias, owner=owner, name=name, version=version)
        )
    return providers


def iter_module_blocks(text: str) -> Iterator[ModuleDeclaration]:
    """Yield every ``module`` block with a ``source``, in text order.

    Each call starts a fresh scan of *text*; commented-out blocks are ignored.
    """
    for m in MODULE_PATTERN.finditer(strip_comments(text)):
        yield ModuleDeclaration(name=m.group("name"), source=m.group("source"))
