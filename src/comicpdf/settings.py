"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from comicpdf.exceptions import SettingsError
from comicpdf.options import DEFAULT_QUALITY, coerce_quality
from comicpdf.typing.enums import BackgroundColor

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "comicpdf"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    default_quality: int = Field(
        default=DEFAULT_QUALITY,
        validation_alias="DEFAULT_QUALITY",
        description="Encoder quality used when a request does not provide one.",
    )
    default_background: BackgroundColor = Field(
        default=BackgroundColor.WHITE,
        validation_alias="DEFAULT_BACKGROUND",
        description="Page background used when a request does not provide one.",
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        validation_alias="MAX_WORKERS",
        description="Maximum number of images normalized concurrently.",
    )

    preview_limit: int = Field(
        default=100,
        ge=1,
        validation_alias="PREVIEW_LIMIT",
        description="Maximum number of thumbnails returned by a preview.",
    )
    thumbnail_width: int = Field(
        default=300,
        ge=1,
        validation_alias="THUMBNAIL_WIDTH",
        description="Thumbnail width in pixels.",
    )
    thumbnail_quality: int = Field(
        default=60,
        ge=1,
        le=100,
        validation_alias="THUMBNAIL_QUALITY",
        description="JPEG quality of thumbnails.",
    )

    batch_archive_name: str = Field(
        default="converted-pdfs.zip",
        validation_alias="BATCH_ARCHIVE_NAME",
        description="Filename of the ZIP bundle produced by batch conversions.",
    )
    combined_filename: str = Field(
        default="combined-comic.pdf",
        validation_alias="COMBINED_FILENAME",
        description="Filename of combined PDFs.",
    )
    combined_edited_filename: str = Field(
        default="combined-comic-edited.pdf",
        validation_alias="COMBINED_EDITED_FILENAME",
        description="Filename of combined PDFs built from editor data.",
    )

    @field_validator("default_quality", mode="before")
    @classmethod
    def _coerce_default_quality(cls, value: object) -> int:
        """Clamp the default quality to the encoder range."""
        return coerce_quality(value)

    @field_validator("default_background", mode="before")
    @classmethod
    def _coerce_default_background(cls, value: object) -> BackgroundColor:
        """Map unknown colors to white."""
        return BackgroundColor.coerce(value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
