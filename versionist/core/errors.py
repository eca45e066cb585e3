from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_PARTIAL_FAILURE = 3
EXIT_VCS = 4


@dataclass
class VersionistError(Exception):
    code: str
    message: str
    detail: str | None = None
    field: str | None = None

    exit_code: ClassVar[int] = EXIT_UNEXPECTED

    def __str__(self) -> str:
        text = self.message
        if self.field:
            text = f"{self.field}: {text}"
        if self.detail:
            return f"{text} ({self.detail})"
        return text


class ConfigurationError(VersionistError):
    """Detected before any file is touched."""

    exit_code: ClassVar[int] = EXIT_CONFIGURATION


class InvalidVersionFormat(ConfigurationError):
    def __init__(self, value: str, *, field: str = "current_version") -> None:
        super().__init__(
            code="invalid_version_format",
            message=f"'{value}' is not a valid MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD] version",
            field=field,
        )


class VersionOverflow(ConfigurationError):
    def __init__(self, value: str, *, field: str = "current_version") -> None:
        super().__init__(
            code="version_overflow",
            message=f"'{value}' has a component above the 64-bit unsigned range",
            field=field,
        )


class EmptyConfiguration(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(
            code="empty_configuration",
            message="no files are declared",
            field="files",
        )


class AmbiguousBumpKind(ConfigurationError):
    def __init__(self, selected: list[str]) -> None:
        if selected:
            detail = "got " + ", ".join(selected)
        else:
            detail = "none given"
        super().__init__(
            code="ambiguous_bump_kind",
            message="select exactly one of --major, --minor, --patch, --prerelease, --release, --new-version",
            detail=detail,
            field="bump",
        )


class MalformedTemplate(ConfigurationError):
    def __init__(self, template: str, reason: str, *, field: str | None = None) -> None:
        super().__init__(
            code="malformed_template",
            message=f"malformed template {template!r}",
            detail=reason,
            field=field,
        )


class VcsError(VersionistError):
    """Raised by a version-control gateway after files were rewritten."""

    exit_code: ClassVar[int] = EXIT_VCS


class StageError(VcsError):
    pass


class CommitError(VcsError):
    pass


class TagError(VcsError):
    pass


class DirtyRepository(VcsError):
    pass


def format_error(error: BaseException) -> str:
    if isinstance(error, VersionistError):
        prefix = f"[{error.code}] " if error.code else ""
        return f"{prefix}{error}"
    return str(error)


def wrap_error(
    error: BaseException,
    *,
    code: str,
    message: str,
) -> VersionistError:
    if isinstance(error, VersionistError):
        return error
    detail = str(error)
    return VersionistError(code=code, message=message, detail=detail)
