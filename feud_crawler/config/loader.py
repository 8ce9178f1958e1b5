"""Configuration loading helpers."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import AppConfig

CONFIG_FILENAMES = ("config.yaml", "config.yml", "config.json")
AUTH_KEY_ENV = "DEEPL_AUTH_KEY"
HOME_ENV = "FEUD_CRAWLER_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from the project home."""

    project_root: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.logs_dir = (root / "logs").resolve()

    def config_path(self) -> Path | None:
        for name in CONFIG_FILENAMES:
            candidate = self.project_root / name
            if candidate.exists():
                return candidate
        return None


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: AppConfig | None = None

    def load(self) -> AppConfig:
        if self._cache is not None:
            return self._cache
        path = self.locator.config_path()
        payload = _read_file(path) if path is not None else {}
        # Legacy layout keeps the credential as a top-level key
        legacy_key = payload.pop(AUTH_KEY_ENV, None)
        config = AppConfig.model_validate(payload)
        if config.translation.auth_key is None:
            auth_key = legacy_key or os.environ.get(AUTH_KEY_ENV)
            if auth_key:
                config = config.model_copy(
                    update={
                        "translation": config.translation.model_copy(update={"auth_key": auth_key})
                    }
                )
        config = config.resolve_paths(self.locator.project_root)
        self._cache = config
        return config


__all__ = ["AUTH_KEY_ENV", "CONFIG_FILENAMES", "ConfigLocator", "ConfigRepository", "HOME_ENV"]
