from __future__ import annotations

import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from versionist.core.errors import MalformedTemplate
from versionist.core.logging import get_logger, log_event

logger = get_logger(__name__)


class RewriteStatus(Enum):
    REWRITTEN = "rewritten"
    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class BumpResult:
    path: Path
    status: RewriteStatus
    occurrences: int = 0
    error: str | None = None
    contents: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not RewriteStatus.IO_ERROR


class FileRewriter:
    """Rewrites version strings in a single file.

    The target is either left untouched or replaced in one ``os.replace``
    step, never partially written.
    """

    encoding = "utf-8"

    def rewrite(
        self,
        path: Path,
        search: str,
        replace: str,
        *,
        regex: bool = False,
        dry_run: bool = False,
    ) -> BumpResult:
        path = Path(path)
        try:
            original = self._read(path)
        except (OSError, UnicodeDecodeError) as exc:
            return self._failed(path, exc)

        if regex:
            updated, occurrences = self._replace_pattern(path, original, search, replace)
        else:
            occurrences = original.count(search) if search else 0
            updated = original.replace(search, replace) if occurrences else original

        if not occurrences:
            log_event(logger, "rewrite.not_found", path=str(path), search=search)
            return BumpResult(path=path, status=RewriteStatus.NOT_FOUND)

        if not dry_run:
            try:
                self._write_atomic(path, updated)
            except OSError as exc:
                return self._failed(path, exc)

        log_event(
            logger,
            "rewrite.rewritten",
            path=str(path),
            occurrences=occurrences,
            dry_run=dry_run,
        )
        return BumpResult(
            path=path,
            status=RewriteStatus.REWRITTEN,
            occurrences=occurrences,
            contents=updated,
        )

    def _read(self, path: Path) -> str:
        with open(path, "r", encoding=self.encoding, newline="") as handle:
            return handle.read()

    def _replace_pattern(
        self, path: Path, text: str, search: str, replace: str
    ) -> tuple[str, int]:
        try:
            pattern = re.compile(search, re.MULTILINE)
            return pattern.subn(replace, text)
        except re.error as exc:
            raise MalformedTemplate(search, str(exc), field=f"files.{path.name}") from exc

    def _write_atomic(self, path: Path, contents: str) -> None:
        # Replace the file a symlink points to, never the link itself.
        target = path.resolve()
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as handle:
                handle.write(contents)
                handle.flush()
                os.fsync(handle.fileno())
            shutil.copymode(target, tmp_path)
            os.replace(tmp_path, target)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def _failed(self, path: Path, exc: BaseException) -> BumpResult:
        log_event(logger, "rewrite.io_error", path=str(path), error=str(exc))
        logger.error("Failed to rewrite %s: %s", path, exc)
        return BumpResult(path=path, status=RewriteStatus.IO_ERROR, error=str(exc))
