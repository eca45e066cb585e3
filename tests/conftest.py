from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from versionist.core.config import get_runtime_config
from versionist.core.errors import VcsError


class FakeVcs:
    """Records gateway calls; optionally fails on one of them."""

    def __init__(self, fail_on: str | None = None, error: VcsError | None = None) -> None:
        self.calls: list[tuple] = []
        self._fail_on = fail_on
        self._error = error

    def _maybe_fail(self, name: str) -> None:
        if self._fail_on == name and self._error is not None:
            raise self._error

    def stage(self, paths: Iterable[Path]) -> None:
        self._maybe_fail("stage")
        self.calls.append(("stage", sorted(Path(p).name for p in paths)))

    def commit(self, message: str) -> None:
        self._maybe_fail("commit")
        self.calls.append(("commit", message))

    def tag(self, name: str, message: str | None = None) -> None:
        self._maybe_fail("tag")
        self.calls.append(("tag", name))


@pytest.fixture
def fake_vcs() -> FakeVcs:
    return FakeVcs()


@pytest.fixture(autouse=True)
def _isolated_runtime_config(monkeypatch):
    for name in (
        "VERSIONIST_CONFIG",
        "VERSIONIST_LOG_DIR",
        "VERSIONIST_LOG_LEVEL",
        "VERSIONIST_COMMIT",
        "VERSIONIST_TAG",
        "VERSIONIST_COMMIT_MESSAGE",
        "VERSIONIST_TAG_NAME",
        "VERSIONIST_TAG_MESSAGE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_runtime_config.cache_clear()
    yield
    get_runtime_config.cache_clear()


@pytest.fixture
def write_project(tmp_path: Path) -> Callable[..., Path]:
    """Write ``versionist.toml`` plus the given files; return the config path."""

    def _write(config: str, files: dict[str, str] | None = None) -> Path:
        for name, contents in (files or {}).items():
            target = tmp_path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(contents, encoding="utf-8")
        config_path = tmp_path / "versionist.toml"
        config_path.write_text(config, encoding="utf-8")
        return config_path

    return _write
