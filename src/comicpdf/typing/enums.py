"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class ArchiveFormat(_EnumMixin):
    """Container formats a comic archive can be decoded as."""

    RAR = "rar"
    ZIP = "zip"

    @property
    def other(self) -> ArchiveFormat:
        """Return the format tried when this one fails to decode."""
        return ArchiveFormat.ZIP if self is ArchiveFormat.RAR else ArchiveFormat.RAR


class BackgroundColor(_EnumMixin):
    """Page background fill."""

    WHITE = "white"
    BLACK = "black"

    @classmethod
    def coerce(cls, value: object) -> BackgroundColor:
        """Parse a loosely typed value, defaulting to white.

        Args:
            value: Raw value (enum, string or None).

        Returns:
            BackgroundColor: Parsed color, white when absent or unrecognized.
        """
        if isinstance(value, BackgroundColor):
            return value
        if isinstance(value, str):
            try:
                return cls(cls.from_str(value))
            except ValueError:
                return cls.WHITE
        return cls.WHITE

    @property
    def rgb(self) -> tuple[float, float, float]:
        """Return the fill as an RGB triple in the 0..1 range."""
        if self is BackgroundColor.BLACK:
            return (0.0, 0.0, 0.0)
        return (1.0, 1.0, 1.0)


class ImageFormat(_EnumMixin):
    """Canonical encodings for embedded page images."""

    PNG = "png"
    JPEG = "jpeg"


class Workflow(_EnumMixin):
    """Conversion call shapes, used for log context."""

    SINGLE = "single"
    BATCH = "batch"
    COMBINE = "combine"
    SINGLE_EDITOR = "single_editor"
    COMBINE_EDITOR = "combine_editor"
    PAGE_COUNT = "page_count"
    PREVIEW = "preview"
