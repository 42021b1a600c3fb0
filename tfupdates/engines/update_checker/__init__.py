"""Update checker engine: compare Terraform declarations with upstream releases."""

from tfupdates.engines.update_checker.discovery import discover_tf_files
from tfupdates.engines.update_checker.models import (
    DeclarationError,
    FileReport,
    ModuleRecord,
    ProviderRecord,
    SkippedDeclaration,
    TerraformRecord,
)
from tfupdates.engines.update_checker.registry_client import RegistryClient
from tfupdates.engines.update_checker.resolver import (
    Credentials,
    LookupTarget,
    provider_release_url,
    resolve_module_source,
)
from tfupdates.engines.update_checker.scanner import (
    FileScanner,
    ScanOptions,
    scan_directory,
    scan_paths,
)

__all__ = [
    "Credentials",
    "DeclarationError",
    "FileReport",
    "FileScanner",
    "LookupTarget",
    "ModuleRecord",
    "ProviderRecord",
    "RegistryClient",
    "ScanOptions",
    "SkippedDeclaration",
    "TerraformRecord",
    "discover_tf_files",
    "provider_release_url",
    "resolve_module_source",
    "scan_directory",
    "scan_paths",
]
