"""Archive input and page entry models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ArchiveUpload(BaseModel):
    """Raw bytes of one uploaded comic archive and its declared filename."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    data: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        """Return the buffer size in bytes."""
        return len(self.data)


class PageEntry(BaseModel):
    """One image entry discovered inside an archive."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    archive: str
    position: int = Field(ge=0)
