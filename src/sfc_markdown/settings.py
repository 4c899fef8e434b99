"""Environment overrides layered on top of ``config.toml``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from .config import CONFIG_FILE, AppConfig, load_config

ENV_PREFIX = "SFC_MD_"

_BOOLEAN_WORDS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


@dataclass(frozen=True, slots=True)
class Settings:
    config_path: Path = CONFIG_FILE
    enable_local_api: bool | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        environ = os.environ if environ is None else environ
        config_path = environ.get(f"{ENV_PREFIX}CONFIG_PATH")
        enable_local_api = environ.get(f"{ENV_PREFIX}ENABLE_LOCAL_API")
        return cls(
            config_path=Path(config_path) if config_path else CONFIG_FILE,
            enable_local_api=_BOOLEAN_WORDS.get(enable_local_api.strip().lower()) if enable_local_api else None,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def resolve_config(path: Path | None = None, settings: Settings | None = None) -> AppConfig:
    """Load ``path`` (or the configured default) and apply environment overrides."""

    settings = settings or get_settings()
    config = load_config(path or settings.config_path)
    if settings.enable_local_api is not None:
        config.runtime.enable_local_api = settings.enable_local_api
    return config


__all__ = ["ENV_PREFIX", "Settings", "get_settings", "resolve_config"]
