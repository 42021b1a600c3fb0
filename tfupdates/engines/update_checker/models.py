"""Data models for the update checker engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from tfupdates.engines.update_checker.version import needs_update

DeclarationKind = Literal["terraform", "provider", "module"]


@dataclass(frozen=True)
class TerraformRecord:
    """The ``required_version`` of a file against the current Terraform release.

    Construction raises ``InvalidVersionError`` if either version carries no
    ``major.minor.patch``.
    """

    source_file: str
    latest_version: str
    ref_version: str
    needs_update: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "needs_update", needs_update(self.latest_version, self.ref_version)
        )


@dataclass(frozen=True)
class ProviderRecord:
    """A ``required_providers`` entry against its latest release."""

    source_file: str
    name: str
    latest_version: str
    ref_version: str
    latest_from_override: bool = False
    needs_update: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "needs_update", needs_update(self.latest_version, self.ref_version)
        )


@dataclass(frozen=True)
class ModuleRecord:
    """A git-sourced module; ``ref_version`` is the ``?ref=`` of its source."""

    source_file: str
    latest_version: str
    ref_version: str
    name: str = ""
    source: str = ""
    needs_update: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "needs_update", needs_update(self.latest_version, self.ref_version)
        )


@dataclass(frozen=True)
class SkippedDeclaration:
    """A declaration that produced no record and no error."""

    kind: DeclarationKind
    name: str
    reason: str


@dataclass(frozen=True)
class DeclarationError:
    """A declaration whose lookup or comparison failed."""

    kind: DeclarationKind
    name: str
    error_type: str
    message: str


@dataclass
class FileReport:
    """Everything a scan found in one configuration file."""

    source_file: str
    terraform: list[TerraformRecord] = field(default_factory=list)
    providers: list[ProviderRecord] = field(default_factory=list)
    modules: list[ModuleRecord] = field(default_factory=list)
    skipped: list[SkippedDeclaration] = field(default_factory=list)
    errors: list[DeclarationError] = field(default_factory=list)
    file_error: str | None = None

    @property
    def records(self) -> list[TerraformRecord | ProviderRecord | ModuleRecord]:
        return [*self.terraform, *self.providers, *self.modules]

    @property
    def outdated(self) -> list[TerraformRecord | ProviderRecord | ModuleRecord]:
        return [r for r in self.records if r.needs_update]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
