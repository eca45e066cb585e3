from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from versionist.domain.rules import (
    CURRENT_VERSION_PLACEHOLDER,
    NEW_VERSION_PLACEHOLDER,
    FileRule,
)

DEFAULT_COMMIT_MESSAGE = "bump {current_version} -> {new_version}"
DEFAULT_TAG_NAME = "{new_version}"


class FileRuleModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    search: str = CURRENT_VERSION_PLACEHOLDER
    replace: str = NEW_VERSION_PLACEHOLDER
    regex: bool = False


class BumpConfig(BaseModel):
    """Parsed ``versionist.toml``.

    ``files`` keeps the declaration order of the TOML document; rules are
    applied in that order.
    """

    model_config = ConfigDict(extra="forbid")

    current_version: str
    commit: bool = False
    tag: bool = False
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    tag_name: str = DEFAULT_TAG_NAME
    tag_message: str | None = None
    files: dict[str, FileRuleModel] = Field(default_factory=dict)

    _path: Path | None = PrivateAttr(default=None)

    def bind(self, path: Path) -> BumpConfig:
        """Remember the file this configuration was read from."""
        self._path = path
        return self

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def root(self) -> Path:
        if self._path is None:
            return Path.cwd()
        return self._path.parent

    def file_rules(self) -> list[FileRule]:
        return [
            FileRule(
                path=name,
                search=rule.search,
                replace=rule.replace,
                regex=rule.regex,
            )
            for name, rule in self.files.items()
        ]
