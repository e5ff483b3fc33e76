"""Archive reader interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from comicpdf.typing.enums import ArchiveFormat


class ArchiveReader(Protocol):
    """Capability shared by the RAR and ZIP readers."""

    archive_format: ArchiveFormat
    filename: str

    def list_entries(self) -> list[str]:
        """List image entries in discovery order.

        Returns:
            list[str]: Entry names with a recognized image extension.
        """

    def materialize(self, names: Iterable[str]) -> dict[str, bytes]:
        """Decode the requested entries only.

        Args:
            names: Entry names to decode.

        Returns:
            dict[str, bytes]: Decoded bytes per entry name; entries that failed are absent.
        """
