"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import AppConfig, CrawlerSettings, SelectorConfig, TranslationSettings

__all__ = [
    "AppConfig",
    "ConfigLocator",
    "ConfigRepository",
    "CrawlerSettings",
    "SelectorConfig",
    "TranslationSettings",
]
