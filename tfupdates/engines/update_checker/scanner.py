"""FileScanner: check the declarations of Terraform files against upstream releases."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from tfupdates.engines.update_checker.discovery import discover_tf_files
from tfupdates.engines.update_checker.grammar import (
    ModuleDeclaration,
    ProviderDeclaration,
    find_required_providers,
    find_terraform_block,
    iter_module_blocks,
)
from tfupdates.engines.update_checker.models import (
    DeclarationError,
    DeclarationKind,
    FileReport,
    ModuleRecord,
    ProviderRecord,
    SkippedDeclaration,
    TerraformRecord,
)
from tfupdates.engines.update_checker.registry_client import RegistryClient
from tfupdates.engines.update_checker.resolver import (
    Credentials,
    bearer,
    provider_release_url,
    resolve_module_source,
)
from tfupdates.exceptions import FetchError, FileNotReadableError, InvalidVersionError

log = structlog.get_logger("tfupdates.engine")

REASON_NO_VERSION = "no version constraint"
REASON_NO_OVERRIDE = "cannot auto-resolve; supply an override"
REASON_UNRECOGNISED_SOURCE = "unrecognised source"


@dataclass(frozen=True)
class ScanOptions:
    """Which declaration kinds to check, plus provider version overrides."""

    analyze_terraform: bool = True
    analyze_providers: bool = True
    analyze_modules: bool = True
    provider_overrides: Mapping[str, str] = field(default_factory=dict)


def read_config(path: Path) -> str:
    """Read a configuration file, raising :class:`FileNotReadableError`."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileNotReadableError(str(path), str(exc)) from exc


class FileScanner:
    """Runs the enabled checks over one file at a time.

    Declarations are handled one by one in text order. A failure on one
    declaration is recorded in ``FileReport.errors`` and the rest still run.
    """

    def __init__(
        self,
        client: RegistryClient,
        credentials: Credentials | None = None,
        options: ScanOptions | None = None,
    ) -> None:
        self._client = client
        self._credentials = credentials or Credentials()
        self._options = options or ScanOptions()
        self._terraform_version: str | None = None

    async def scan_file(self, path: Path) -> FileReport:
        """Scan one file; raises :class:`FileNotReadableError` before any lookup."""
        text = read_config(path)
        report = FileReport(source_file=str(path))
        log.debug("scanner.file_start", file=report.source_file)

        if self._options.analyze_terraform:
            await self._check_terraform(text, report)
        if self._options.analyze_providers:
            for provider in find_required_providers(text):
                await self._check_provider(provider, report)
        if self._options.analyze_modules:
            for module in iter_module_blocks(text):
                await self._check_module(module, report)

        log.info(
            "scanner.file_done",
            file=report.source_file,
            records=len(report.records),
            outdated=len(report.outdated),
            skipped=len(report.skipped),
            errors=len(report.errors),
        )
        return report

    # ── terraform ────────────────────────────────────────────────────────

    async def _check_terraform(self, text: str, report: FileReport) -> None:
        declaration = find_terraform_block(text)
        if declaration is None:
            return
        try:
            latest = await self._current_terraform_version()
            report.terraform.append(
                TerraformRecord(
                    source_file=report.source_file,
                    latest_version=latest,
                    ref_version=declaration.ref_version,
                )
            )
        except (FetchError, InvalidVersionError) as exc:
            self._record_error(report, "terraform", "terraform", exc)

    async def _current_terraform_version(self) -> str:
        if self._terraform_version is None:
            self._terraform_version = await self._client.fetch_terraform_version()
        return self._terraform_version

    # ── providers ────────────────────────────────────────────────────────

    async def _check_provider(self, provider: ProviderDeclaration, report: FileReport) -> None:
        if not provider.version:
            report.skipped.append(
                SkippedDeclaration(kind="provider", name=provider.alias, reason=REASON_NO_VERSION)
            )
            return

        url = provider_release_url(provider.name or provider.alias, provider.owner)
        auth_header = bearer(self._credentials.github_token)
        try:
            if await self._client.url_exists(url, auth_header):
                latest = await self._client.fetch_release_version(url, auth_header, strip_v=True)
                from_override = False
            else:
                override = self._options.provider_overrides.get(provider.alias)
                if not override:
                    log.warning(
                        "scanner.provider_unresolved",
                        file=report.source_file,
                        provider=provider.alias,
                        url=url,
                    )
                    report.skipped.append(
                        SkippedDeclaration(
                            kind="provider", name=provider.alias, reason=REASON_NO_OVERRIDE
                        )
                    )
                    return
                latest = override
                from_override = True

            report.providers.append(
                ProviderRecord(
                    source_file=report.source_file,
                    name=provider.alias,
                    latest_version=latest,
                    ref_version=provider.version,
                    latest_from_override=from_override,
                )
            )
        except (FetchError, InvalidVersionError) as exc:
            self._record_error(report, "provider", provider.alias, exc)

    # ── modules ──────────────────────────────────────────────────────────

    async def _check_module(self, module: ModuleDeclaration, report: FileReport) -> None:
        target = resolve_module_source(module.source, self._credentials)
        if not target.is_resolved:
            log.debug(
                "scanner.module_source_skipped",
                file=report.source_file,
                module=module.name,
                source=module.source,
            )
            report.skipped.append(
                SkippedDeclaration(
                    kind="module", name=module.name, reason=REASON_UNRECOGNISED_SOURCE
                )
            )
            return

        try:
            latest = await self._client.fetch_release_version(target.url, target.auth_header)
            report.modules.append(
                ModuleRecord(
                    source_file=report.source_file,
                    latest_version=latest,
                    ref_version=target.ref_version,
                    name=module.name,
                    source=module.source,
                )
            )
        except (FetchError, InvalidVersionError) as exc:
            self._record_error(report, "module", module.name, exc)

    # ── internal ─────────────────────────────────────────────────────────

    @staticmethod
    def _record_error(
        report: FileReport, kind: DeclarationKind, name: str, exc: Exception
    ) -> None:
        log.warning(
            "scanner.declaration_failed",
            file=report.source_file,
            kind=kind,
            name=name,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        report.errors.append(
            DeclarationError(kind=kind, name=name, error_type=type(exc).__name__, message=str(exc))
        )


async def scan_paths(
    paths: Iterable[Path],
    client: RegistryClient,
    credentials: Credentials | None = None,
    options: ScanOptions | None = None,
) -> list[FileReport]:
    """Scan files one after another; an unreadable file does not stop the run."""
    scanner = FileScanner(client, credentials, options)
    reports: list[FileReport] = []
    for path in paths:
        try:
            reports.append(await scanner.scan_file(path))
        except FileNotReadableError as exc:
            log.error("scanner.file_unreadable", file=str(path), error=str(exc))
            reports.append(FileReport(source_file=str(path), file_error=str(exc)))
    return reports


async def scan_directory(
    directory: Path,
    client: RegistryClient,
    credentials: Credentials | None = None,
    options: ScanOptions | None = None,
) -> list[FileReport]:
    """Discover ``.tf`` files under *directory* and scan each of them."""
    files = discover_tf_files(directory)
    log.info("scanner.discovered", directory=str(directory), files=len(files))
    return await scan_paths(files, client, credentials, options)
