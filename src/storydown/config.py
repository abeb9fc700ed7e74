"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (STORYDOWN__BROWSER__HEADLESS=false)
  2. storydown.yaml         (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("storydown")


def _find_config_file() -> str | None:
    """Return the path of the first storydown.yaml found, or None."""
    candidates = [
        Path("storydown.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "storydown.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ManifestSettings(BaseModel):
    # Tried in order: stories.json (Storybook <= 6), index.json (Storybook 7+)
    paths: list[str] = ["stories.json", "index.json"]
    timeout_seconds: float = 30.0


class BrowserSettings(BaseModel):
    headless: bool = True
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "networkidle"
    navigation_timeout_ms: int = 45_000
    render_wait_ms: int = 2_000
    toggle_wait_ms: int = 800


class DocumentSettings(BaseModel):
    title: str = "Storybook export"
    default_output: str = "storybook-export.md"


class ProgressSettings(BaseModel):
    enabled: bool = True


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: STORYDOWN__BROWSER__RENDER_WAIT_MS=500
        env_prefix="STORYDOWN__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    manifest: ManifestSettings = ManifestSettings()
    browser: BrowserSettings = BrowserSettings()
    document: DocumentSettings = DocumentSettings()
    progress: ProgressSettings = ProgressSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
