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
    """Raised when runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class UnknownFormatError(PackageError):
    """Raised when neither magic bytes nor extension identify the archive type."""

    filename: str
    message: str = "Cannot determine archive type. File may be corrupted."

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message} ({self.filename})"


@dataclass(frozen=True)
class ArchiveDecodeError(PackageError):
    """Raised by a reader when its decoder rejects a buffer."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ExtractionFailedError(PackageError):
    """Raised when both the detected and the fallback decoder failed."""

    filename: str
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Failed to extract archive {self.filename}: {self.message}"


@dataclass(frozen=True)
class NoImagesFoundError(PackageError):
    """Raised when an archive decodes but holds no recognized image entry."""

    filename: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"No images found in archive file {self.filename}"


@dataclass(frozen=True)
class ImageDecodeError(PackageError):
    """Raised when one page cannot be decoded or re-encoded."""

    name: str
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Failed to process image {self.name}: {self.message}"


@dataclass(frozen=True)
class EmptyDocumentError(PackageError):
    """Raised when a document ends up without any rendered page."""

    filename: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"No pages could be rendered for {self.filename}"


@dataclass(frozen=True)
class AllConversionsFailedError(PackageError):
    """Raised when no archive of a batch could be converted."""

    attempted: int
    message: str = "No files could be converted"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message} ({self.attempted} attempted)"


@dataclass(frozen=True)
class EditorDataError(PackageError):
    """Raised when editor selection data cannot be parsed."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Invalid editor data: {self.message}"
