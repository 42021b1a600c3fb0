"""tfupdates: report outdated Terraform, provider and module versions."""

__version__ = "0.1.0"

from tfupdates.engines.update_checker import (
    Credentials,
    FileReport,
    FileScanner,
    ModuleRecord,
    ProviderRecord,
    RegistryClient,
    ScanOptions,
    TerraformRecord,
    scan_directory,
    scan_paths,
)
from tfupdates.exceptions import (
    FetchError,
    FileNotReadableError,
    InvalidVersionError,
    TfUpdatesError,
)

__all__ = [
    "Credentials",
    "FetchError",
    "FileNotReadableError",
    "FileReport",
    "FileScanner",
    "InvalidVersionError",
    "ModuleRecord",
    "ProviderRecord",
    "RegistryClient",
    "ScanOptions",
    "TerraformRecord",
    "TfUpdatesError",
    "scan_directory",
    "scan_paths",
]
