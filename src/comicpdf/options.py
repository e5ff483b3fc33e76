"""Coercion of loosely typed conversion parameters."""

from __future__ import annotations

import re

DEFAULT_QUALITY = 75
MIN_QUALITY = 1
MAX_QUALITY = 100

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_ARCHIVE_SUFFIX_RE = re.compile(r"\.(cbr|cbz)$", re.IGNORECASE)


def parse_leading_int(value: object) -> int | None:
    """Parse the integer prefix of a value.

    Args:
        value (object): Raw value (int, string or None).

    Returns:
        int | None: Parsed integer, or None when no leading digits exist.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def coerce_quality(value: object, default: int = DEFAULT_QUALITY) -> int:
    """Resolve an encoder quality in the 1..100 range.

    Missing, non-numeric and zero values fall back to `default`.

    Args:
        value (object): Raw quality value.
        default (int): Fallback quality.

    Returns:
        int: Quality clamped to 1..100.
    """
    parsed = parse_leading_int(value)
    if not parsed:
        parsed = default
    return max(MIN_QUALITY, min(parsed, MAX_QUALITY))


def coerce_page_number(value: object) -> int | None:
    """Return a positive page number or None."""
    parsed = parse_leading_int(value)
    if not parsed:
        return None
    return parsed


def pdf_filename(filename: str) -> str:
    """Derive the output PDF name from an archive filename.

    Args:
        filename (str): Source archive filename.

    Returns:
        str: Filename with a trailing `.cbr`/`.cbz` replaced by `.pdf`, or with
        `.pdf` appended when it has no comic archive suffix.
    """
    renamed, count = _ARCHIVE_SUFFIX_RE.subn(".pdf", filename)
    if count:
        return renamed
    if filename.lower().endswith(".pdf"):
        return filename
    return f"{filename}.pdf"
