"""Human ordering of archive entry names."""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from comicpdf.typing.models import PageEntry

_TOKEN_RE = re.compile(r"\d+|\D+")
_PATH_SEPARATOR_RE = re.compile(r"[\\/]")


def _basename(name: str) -> str:
    return _PATH_SEPARATOR_RE.split(name)[-1]


def tokenize_name(name: str) -> list[str]:
    """Split a name into lowercase digit and non-digit runs.

    Args:
        name (str): Entry name, possibly with a directory prefix.

    Returns:
        list[str]: Alternating runs of the lowercased basename.
    """
    return _TOKEN_RE.findall(_basename(name).lower())


def compare_page_names(first: str, second: str) -> int:
    """Compare two entry names in natural order.

    Numeric runs compare by value (`page9` before `page10`), other runs compare
    as strings, and a missing run sorts before any present one.

    Args:
        first (str): First entry name.
        second (str): Second entry name.

    Returns:
        int: Negative, zero or positive, like a classic comparator.
    """
    first_tokens = tokenize_name(first)
    second_tokens = tokenize_name(second)

    for index in range(max(len(first_tokens), len(second_tokens))):
        left = first_tokens[index] if index < len(first_tokens) else ""
        right = second_tokens[index] if index < len(second_tokens) else ""

        if left.isdecimal() and right.isdecimal():
            difference = int(left) - int(right)
            if difference:
                return difference
        elif left != right:
            return -1 if left < right else 1
    return 0


_NAME_KEY = cmp_to_key(compare_page_names)


def natural_sort(names: Iterable[str]) -> list[str]:
    """Return names in natural order; equal names keep their input order."""
    return sorted(names, key=_NAME_KEY)


def sort_page_entries(entries: Iterable[PageEntry]) -> list[PageEntry]:
    """Return page entries in natural order of their names (stable)."""
    return sorted(entries, key=lambda entry: _NAME_KEY(entry.name))
