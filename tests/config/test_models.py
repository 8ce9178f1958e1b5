from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from feud_crawler.config import AppConfig, CrawlerSettings, TranslationSettings


def test_crawler_defaults_match_site_pacing() -> None:
    settings = CrawlerSettings()

    assert settings.base_url == "https://www.familyfeudfriends.com/answers/"
    assert (settings.batch_size, settings.batch_delay, settings.item_delay) == (10, 0.5, 0.1)
    assert settings.request_timeout == 10.0
    assert "Chrome/91" in settings.user_agent


def test_translation_defaults_match_service_limits() -> None:
    settings = TranslationSettings()

    assert (settings.source_lang, settings.target_lang) == ("en", "ru")
    assert settings.max_attempts == 5
    assert (settings.backoff_base, settings.backoff_cap) == (1.0, 60.0)
    assert (settings.variant_delay, settings.record_delay) == (0.5, 1.0)


def test_blank_auth_key_is_treated_as_missing() -> None:
    assert TranslationSettings(auth_key="   ").auth_key is None


def test_backoff_cap_must_cover_base() -> None:
    with pytest.raises(ValidationError):
        TranslationSettings(backoff_base=10, backoff_cap=5)


def test_batch_size_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        CrawlerSettings(batch_size=0)


def test_resolve_paths_keeps_absolute_paths(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere" / "data.json"
    config = AppConfig(crawler=CrawlerSettings(output_file=absolute))

    resolved = config.resolve_paths(tmp_path / "root")

    assert resolved.crawler.output_file == absolute
    assert resolved.translation.output_file == (tmp_path / "root" / "dataRu.json").resolve()
    assert config.translation.output_file == Path("dataRu.json")
