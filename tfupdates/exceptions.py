"""Custom exceptions for tfupdates."""

from __future__ import annotations


class TfUpdatesError(Exception):
    """Base exception for all tfupdates errors."""


class InvalidVersionError(TfUpdatesError):
    """Raised when a version string has no ``major.minor.patch`` component."""

    def __init__(self, side: str, value: str):
        self.side = side
        self.value = value
        super().__init__(f"Invalid {side} version: {value!r}")


class FetchError(TfUpdatesError):
    """Raised when a registry request fails or returns an unusable body."""

    def __init__(self, url: str, message: str, status: int | None = None):
        self.url = url
        self.status = status
        super().__init__(f"{message} ({url})")


class FileNotReadableError(TfUpdatesError):
    """Raised when a configuration file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"cannot read {path}: {reason}")
