"""Editor data and page selection models."""

from __future__ import annotations

import json

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from comicpdf.exceptions import EditorDataError
from comicpdf.typing.enums import BackgroundColor
from comicpdf.typing.models.archive import PageEntry


class EditorPage(BaseModel):
    """Per-page override sent by the page editor."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    index: int
    included: bool = False
    background_color: BackgroundColor = Field(
        default=BackgroundColor.WHITE,
        validation_alias=AliasChoices("backgroundColor", "bgColor", "background_color"),
    )

    @field_validator("background_color", mode="before")
    @classmethod
    def _coerce_background(cls, value: object) -> BackgroundColor:
        """Map unknown colors to white."""
        return BackgroundColor.coerce(value)


class SelectedPage(BaseModel):
    """A page chosen for rendering, with its resolved background."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    entry: PageEntry
    index: int = Field(ge=0)
    background_color: BackgroundColor = BackgroundColor.WHITE


class PageSelection(BaseModel):
    """Ordered pages to render from one archive."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    archive: str
    total_pages: int = Field(ge=0)
    pages: list[SelectedPage]

    @property
    def names(self) -> list[str]:
        """Return entry names in output order."""
        return [page.entry.name for page in self.pages]


_EDITOR_PAGES = TypeAdapter(list[EditorPage])
_COMBINATION_EDITOR_DATA = TypeAdapter(dict[str, list[EditorPage]])


def _load_json(raw: str | bytes) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise EditorDataError(message=str(exc)) from exc


def parse_editor_pages(raw: str | bytes | list[object]) -> list[EditorPage]:
    """Parse single-archive editor data.

    Args:
        raw (str | bytes | list[object]): JSON text or already decoded list.

    Raises:
        EditorDataError: If the payload is not a list of page overrides.

    Returns:
        list[EditorPage]: Page overrides in caller order.
    """
    payload = _load_json(raw) if isinstance(raw, (str, bytes)) else raw
    try:
        return _EDITOR_PAGES.validate_python(payload)
    except ValidationError as exc:
        raise EditorDataError(message=str(exc)) from exc


def parse_combination_editor_data(
    raw: str | bytes | dict[str, object] | None,
) -> dict[str, list[EditorPage]]:
    """Parse combine-mode editor data keyed by archive filename.

    Args:
        raw (str | bytes | dict[str, object] | None): JSON text, decoded mapping or None.

    Raises:
        EditorDataError: If the payload is not a filename -> page list mapping.

    Returns:
        dict[str, list[EditorPage]]: Overrides per archive filename.
    """
    if raw is None or (isinstance(raw, (str, bytes)) and not raw.strip()):
        return {}
    payload = _load_json(raw) if isinstance(raw, (str, bytes)) else raw
    try:
        return _COMBINATION_EDITOR_DATA.validate_python(payload)
    except ValidationError as exc:
        raise EditorDataError(message=str(exc)) from exc
