from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

# Keys of versionist.toml that the environment may override.
CONFIG_OVERRIDE_KEYS = ("commit", "tag", "commit_message", "tag_name", "tag_message")


class RuntimeConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="VERSIONIST_", case_sensitive=False)

    config: Path | None = None
    log_level: str = "warning"
    log_format: str = "json"
    log_dir: Path | None = None

    commit: bool | None = None
    tag: bool | None = None
    commit_message: str | None = None
    tag_name: str | None = None
    tag_message: str | None = None

    def config_overrides(self) -> dict[str, Any]:
        """Configuration keys set through the environment."""
        values = {key: getattr(self, key) for key in CONFIG_OVERRIDE_KEYS}
        return {key: value for key, value in values.items() if value is not None}


@lru_cache
def get_runtime_config() -> RuntimeConfig:
    return RuntimeConfig()
