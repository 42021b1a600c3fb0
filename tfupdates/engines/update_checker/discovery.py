"""Find Terraform configuration files under a directory."""

from __future__ import annotations

from pathlib import Path

TF_PATTERN = "**/*.tf"

# Provider/module caches written by `terraform init`.
_SKIP_DIRS = frozenset({".terraform"})


def discover_tf_files(directory: Path) -> list[Path]:
    """Walk *directory* and return every ``.tf`` file, sorted.

    A missing directory yields an empty list.
    """
    if not directory.is_dir():
        return []
    return [
        hit
        for hit in sorted(directory.glob(TF_PATTERN))
        if hit.is_file() and not _SKIP_DIRS.intersection(hit.relative_to(directory).parts)
    ]
