"""CLI entry point: tf-updates.

Usage:
    tf-updates ./infra                          # check everything under ./infra
    tf-updates ./infra --no-modules --json      # terraform + providers, JSON output
    tf-updates ./infra --provider-version datadog=3.40.0 --fail-on-outdated
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from tfupdates.core.config import Settings
from tfupdates.core.logging import setup_logging
from tfupdates.engines.update_checker.models import FileReport
from tfupdates.engines.update_checker.registry_client import RegistryClient
from tfupdates.engines.update_checker.resolver import Credentials
from tfupdates.engines.update_checker.scanner import ScanOptions, scan_directory


def _parse_overrides(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``NAME=VERSION`` options into a mapping."""
    overrides: dict[str, str] = {}
    for raw in values:
        name, sep, version = raw.partition("=")
        if not sep or not name.strip() or not version.strip():
            raise click.BadParameter(
                f"expected NAME=VERSION, got {raw!r}", param_hint="--provider-version"
            )
        overrides[name.strip()] = version.strip()
    return overrides


def _print_reports(reports: list[FileReport], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([r.to_dict() for r in reports], indent=2))
        return

    if not reports:
        click.echo("No Terraform files found.")
        return

    for report in reports:
        click.echo(f"  {report.source_file}")
        if report.file_error:
            click.echo(f"    ! {report.file_error}")
        for rec in report.terraform:
            click.echo(_format_line("terraform", rec.ref_version, rec.latest_version, rec.needs_update))
        for rec in report.providers:
            click.echo(_format_line(rec.name, rec.ref_version, rec.latest_version, rec.needs_update))
        for rec in report.modules:
            click.echo(
                _format_line(rec.name or rec.source, rec.ref_version, rec.latest_version, rec.needs_update)
            )
        for skip in report.skipped:
            click.echo(f"    - {skip.kind} {skip.name}: skipped ({skip.reason})")
        for err in report.errors:
            click.echo(f"    ! {err.kind} {err.name}: {err.error_type}: {err.message}")
        click.echo()


def _format_line(label: str, ref_version: str, latest_version: str, outdated: bool) -> str:
    status = "UPDATE" if outdated else "ok"
    return f"    [{status}] {label} {ref_version} -> {latest_version}"


async def _run(
    directory: Path,
    credentials: Credentials,
    options: ScanOptions,
    timeout: float,
) -> list[FileReport]:
    async with RegistryClient(timeout=timeout) as client:
        return await scan_directory(directory, client, credentials, options)


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--terraform/--no-terraform", default=True, help="Check required_version")
@click.option("--providers/--no-providers", default=True, help="Check required_providers")
@click.option("--modules/--no-modules", default=True, help="Check git-sourced modules")
@click.option("--github-pat", default=None, help="Token for github.com (env: TFUPDATES_GITHUB_PAT)")
@click.option(
    "--github-enterprise-pat",
    default=None,
    help="Token for GitHub Enterprise hosts (env: TFUPDATES_GITHUB_ENTERPRISE_PAT)",
)
@click.option(
    "--provider-version",
    "provider_versions",
    multiple=True,
    metavar="NAME=VERSION",
    help="Latest version to assume for a provider whose releases cannot be found",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--fail-on-outdated", is_flag=True, help="Exit 1 if anything needs an update")
@click.option("--timeout", type=float, default=None, help="HTTP timeout in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    directory: Path,
    terraform: bool,
    providers: bool,
    modules: bool,
    github_pat: str | None,
    github_enterprise_pat: str | None,
    provider_versions: tuple[str, ...],
    as_json: bool,
    fail_on_outdated: bool,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Report outdated Terraform, provider and module versions under DIRECTORY."""
    setup_logging("DEBUG" if verbose else None)
    settings = Settings.from_env()

    # Flags win over the environment, token by token.
    env_credentials = Credentials.from_env()
    credentials = Credentials(
        github_token=github_pat or env_credentials.github_token,
        enterprise_token=github_enterprise_pat or env_credentials.enterprise_token,
    )
    options = ScanOptions(
        analyze_terraform=terraform,
        analyze_providers=providers,
        analyze_modules=modules,
        provider_overrides=_parse_overrides(provider_versions),
    )

    click.echo("\nConfig:", err=True)
    click.echo(f"  TF Directory: {directory}", err=True)
    click.echo(f"  Analyze Terraform: {terraform}", err=True)
    click.echo(f"  Analyze Providers: {providers}", err=True)
    click.echo(f"  Analyze Modules: {modules}\n", err=True)

    reports = asyncio.run(
        _run(directory, credentials, options, timeout or settings.http_timeout)
    )
    _print_reports(reports, as_json)

    if fail_on_outdated and any(r.outdated for r in reports):
        sys.exit(1)


if __name__ == "__main__":
    main()
