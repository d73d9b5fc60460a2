"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (JOURNEYDOCS__DOCS__USERNAME=alice)
  2. journeydocs.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
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

DEFAULT_JOURNEY_PREFIXES = ["/docs/learning-journeys/", "/tutorials/"]


def _find_config_file() -> str | None:
    """Return the path of the first journeydocs.yaml found, or None."""
    candidates = [
        Path("journeydocs.yaml"),
        Path(platformdirs.user_config_dir("journeydocs")) / "journeydocs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class DocsSettings(BaseModel):
    base_url: str = "https://grafana.com"
    content_path: str = "/docs/"
    journey_prefixes: list[str] = list(DEFAULT_JOURNEY_PREFIXES)
    # Basic auth is attached only when username is set; password may be empty.
    username: str = ""
    password: str = ""


class FetcherSettings(BaseModel):
    timeout_seconds: float = 5.0
    user_agent: str = "journeydocs/1.0"


class CacheSettings(BaseModel):
    content_ttl_seconds: int = 300


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: JOURNEYDOCS__FETCHER__TIMEOUT_SECONDS=10
        env_prefix="JOURNEYDOCS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    docs: DocsSettings = DocsSettings()
    fetcher: FetcherSettings = FetcherSettings()
    cache: CacheSettings = CacheSettings()
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
