from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from versionist.core.config_model import BumpConfig
from versionist.core.errors import ConfigurationError

CONFIG_FILENAME = "versionist.toml"


class ConfigStore:
    """Load ``versionist.toml`` into a validated :class:`BumpConfig`."""

    def __init__(self, path: Path, overrides: dict[str, Any] | None = None) -> None:
        self._path = path
        self._overrides = dict(overrides or {})

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BumpConfig:
        raw = {**self._read(), **self._overrides}
        try:
            config = BumpConfig.model_validate(raw)
        except ValidationError as exc:
            raise self._validation_error(exc) from exc
        return config.bind(self._path.resolve())

    def _read(self) -> dict[str, Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigurationError(
                code="config_not_found",
                message=f"configuration file not found: {self._path}",
                field="config",
            ) from exc
        except OSError as exc:
            raise ConfigurationError(
                code="config_unreadable",
                message=f"cannot read configuration file {self._path}",
                detail=str(exc),
                field="config",
            ) from exc
        try:
            return tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(
                code="config_invalid_toml",
                message=f"{self._path} is not valid TOML",
                detail=str(exc),
                field="config",
            ) from exc

    def _validation_error(self, exc: ValidationError) -> ConfigurationError:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "config"
        return ConfigurationError(
            code="config_invalid",
            message=str(first.get("msg", "invalid value")),
            detail=f"{exc.error_count()} error(s) in {self._path}",
            field=field,
        )


def load_config(
    path: Path | str | None = None,
    overrides: dict[str, Any] | None = None,
) -> BumpConfig:
    return ConfigStore(Path(path) if path else Path(CONFIG_FILENAME), overrides).load()
