"""Pydantic models used across the crawler configuration flow."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class SelectorConfig(BaseModel):
    """CSS selectors locating the semantic regions of the answers site."""

    listing_container: str = ".blog-post"
    listing_links: str = "ul li a"
    question_title: str = "h1.blog-post-title"
    answer_table: str = ".table.table-striped"


class CrawlerSettings(BaseModel):
    """Settings for the extraction run."""

    base_url: str = "https://www.familyfeudfriends.com/answers/"
    output_file: Path = Field(default=Path("data.json"))
    batch_size: int = Field(default=10, ge=1)
    batch_delay: float = Field(default=0.5, ge=0)
    item_delay: float = Field(default=0.1, ge=0)
    request_timeout: float = Field(default=10.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)

    @field_validator("output_file", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)


class TranslationSettings(BaseModel):
    """Settings for the translation run.

    Backoff for an overloaded translation service is
    ``min(backoff_base * 2 ** attempt, backoff_cap)`` seconds, attempts
    counted from 1.
    """

    auth_key: str | None = None
    input_file: Path = Field(default=Path("data.json"))
    output_file: Path = Field(default=Path("dataRu.json"))
    source_lang: str = "en"
    target_lang: str = "ru"
    max_attempts: int = Field(default=5, ge=1)
    backoff_base: float = Field(default=1.0, gt=0)
    backoff_cap: float = Field(default=60.0, gt=0)
    variant_delay: float = Field(default=0.5, ge=0)
    record_delay: float = Field(default=1.0, ge=0)

    @field_validator("input_file", "output_file", mode="before")
    @classmethod
    def _coerce_paths(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("auth_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _validate_backoff(self) -> "TranslationSettings":
        if self.backoff_cap < self.backoff_base:
            raise ValueError("backoff_cap must be >= backoff_base")
        return self


class AppConfig(BaseModel):
    """Root configuration document."""

    crawler: CrawlerSettings = Field(default_factory=CrawlerSettings)
    translation: TranslationSettings = Field(default_factory=TranslationSettings)

    def resolve_paths(self, base_dir: Path) -> "AppConfig":
        """Return a copy whose relative data-file paths are anchored at ``base_dir``."""

        def _anchor(path: Path) -> Path:
            return path if path.is_absolute() else (base_dir / path).resolve()

        crawler = self.crawler.model_copy(update={"output_file": _anchor(self.crawler.output_file)})
        translation = self.translation.model_copy(
            update={
                "input_file": _anchor(self.translation.input_file),
                "output_file": _anchor(self.translation.output_file),
            }
        )
        return self.model_copy(update={"crawler": crawler, "translation": translation})


__all__ = [
    "AppConfig",
    "CrawlerSettings",
    "DEFAULT_USER_AGENT",
    "SelectorConfig",
    "TranslationSettings",
]
