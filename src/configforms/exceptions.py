"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class SchemaDefectError(PackageError):
    """Raised when a configuration schema is malformed or contradicts itself.

    A defect is reported once, when the schema is loaded, and no edit session
    can be opened on it.
    """

    message: str
    path: tuple[str, ...] = ()

    def __str__(self) -> str:
        """Return error message payload."""
        if not self.path:
            return self.message
        return f"{'.'.join(self.path)}: {self.message}"


@dataclass
class SpecStoreError(PackageError):
    """Raised when spec document loading/saving constraints are violated."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UnknownVariantError(PackageError):
    """Raised when a union is switched to a discriminant it does not declare."""

    token: str
    known: tuple[str, ...]

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Unknown variant '{self.token}'. Expected one of: {', '.join(self.known)}"


@dataclass(frozen=True)
class SessionError(PackageError):
    """Raised when an edit session is used outside its lifecycle."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class SubmitError(PackageError):
    """Raised by submit handlers when the device rejects a value."""

    message: str
    code: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message} (code {self.code})" if self.code is not None else self.message
