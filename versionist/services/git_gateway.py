from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable

from versionist.core.errors import (
    CommitError,
    DirtyRepository,
    StageError,
    TagError,
    VcsError,
)


class GitGateway:
    """Stage, commit and tag through the ``git`` executable."""

    def __init__(self, cwd: Path, *, executable: str = "git") -> None:
        self._cwd = cwd
        self._executable = executable

    def stage(self, paths: Iterable[Path]) -> None:
        names = [str(path) for path in paths]
        if not names:
            return
        self._run(["add", "--", *names], error=StageError, code="git_stage_failed")

    def commit(self, message: str) -> None:
        self._run(["commit", "-m", message], error=CommitError, code="git_commit_failed")

    def tag(self, name: str, message: str | None = None) -> None:
        if self._tag_exists(name):
            raise TagError(
                code="git_tag_exists",
                message=f"tag '{name}' already exists",
            )
        self._run(
            ["tag", "-a", name, "-m", message or name],
            error=TagError,
            code="git_tag_failed",
        )

    def is_dirty(self) -> bool:
        result = self._run(
            ["status", "--porcelain", "--untracked-files=no"],
            error=VcsError,
            code="git_status_failed",
        )
        return bool(result.stdout.strip())

    def ensure_clean(self) -> None:
        if self.is_dirty():
            raise DirtyRepository(
                code="git_dirty",
                message="git working tree has uncommitted changes",
                detail="commit or stash them, or pass --allow-dirty",
            )

    def _tag_exists(self, name: str) -> bool:
        try:
            result = subprocess.run(
                [self._executable, "show-ref", "--tags", "--verify", "--quiet", f"refs/tags/{name}"],
                cwd=self._cwd,
                check=False,
                capture_output=True,
            )
        except OSError:
            return False
        return result.returncode == 0

    def _run(
        self,
        args: list[str],
        *,
        error: type[VcsError],
        code: str,
    ) -> subprocess.CompletedProcess[str]:
        command = [self._executable, *args]
        try:
            return subprocess.run(
                command,
                cwd=self._cwd,
                check=True,
                capture_output=True,
                text=True,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.CalledProcessError as exc:
            raise error(
                code=code,
                message=f"'{' '.join(command[:2])}' failed with exit code {exc.returncode}",
                detail=(exc.stderr or exc.stdout or "").strip() or None,
            ) from exc
        except OSError as exc:
            raise error(
                code=code,
                message=f"could not run {self._executable}",
                detail=str(exc),
            ) from exc
