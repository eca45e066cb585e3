from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from versionist.core.errors import (
    AmbiguousBumpKind,
    InvalidVersionFormat,
    VersionOverflow,
)

MAX_COMPONENT = 2**64 - 1
_MAX_COMPONENT_DIGITS = len(str(MAX_COMPONENT))

_NUMERIC = r"0|[1-9][0-9]*"
_IDENTIFIER = r"(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_BUILD_IDENTIFIER = r"[0-9A-Za-z-]+"

SEMVER_RE = re.compile(
    rf"(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?"
    rf"(?:\+(?P<build>{_BUILD_IDENTIFIER}(?:\.{_BUILD_IDENTIFIER})*))?"
)
PRERELEASE_RE = re.compile(rf"{_IDENTIFIER}(?:\.{_IDENTIFIER})*")
BUILD_RE = re.compile(rf"{_BUILD_IDENTIFIER}(?:\.{_BUILD_IDENTIFIER})*")


@dataclass(frozen=True)
class SemanticVersion:
    """An immutable semantic version.

    Equality covers every attribute, build metadata included, so that
    rendering and re-parsing always yields an equal value. Ordering follows
    semver precedence and ignores build metadata.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: str | None = None

    def __str__(self) -> str:
        return render(self)

    def _precedence(self) -> tuple:
        # A release sorts after every prerelease of the same numbers.
        if not self.prerelease:
            pre_key: tuple = (1,)
        else:
            pre_key = (0, tuple(_identifier_key(item) for item in self.prerelease))
        return (self.major, self.minor, self.patch, pre_key)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() <= other._precedence()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() > other._precedence()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() >= other._precedence()


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    # Numeric identifiers carry no leading zeros, so length then text orders them.
    if identifier.isdigit():
        return (0, len(identifier), identifier)
    return (1, 0, identifier)


class Part(Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"
    RELEASE = "release"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class BumpKind:
    part: Part
    label: str | None = None
    version: SemanticVersion | None = None

    @classmethod
    def major(cls) -> BumpKind:
        return cls(Part.MAJOR)

    @classmethod
    def minor(cls) -> BumpKind:
        return cls(Part.MINOR)

    @classmethod
    def patch(cls) -> BumpKind:
        return cls(Part.PATCH)

    @classmethod
    def prerelease(cls, label: str) -> BumpKind:
        return cls(Part.PRERELEASE, label=label)

    @classmethod
    def release(cls) -> BumpKind:
        return cls(Part.RELEASE)

    @classmethod
    def explicit(cls, version: SemanticVersion) -> BumpKind:
        return cls(Part.EXPLICIT, version=version)


def parse_version(text: str, *, field: str = "current_version") -> SemanticVersion:
    """Parse ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]``.

    Raises InvalidVersionFormat for anything else, and VersionOverflow when a
    numeric component does not fit in 64 unsigned bits.
    """
    if not isinstance(text, str):
        raise InvalidVersionFormat(str(text), field=field)
    match = SEMVER_RE.fullmatch(text)
    if not match:
        raise InvalidVersionFormat(text, field=field)
    digits = [match.group(name) for name in ("major", "minor", "patch")]
    # Checked on length first; int() refuses very long digit strings.
    if any(len(value) > _MAX_COMPONENT_DIGITS for value in digits):
        raise VersionOverflow(text, field=field)
    numbers = [int(value) for value in digits]
    if any(number > MAX_COMPONENT for number in numbers):
        raise VersionOverflow(text, field=field)
    prerelease = match.group("prerelease")
    return SemanticVersion(
        major=numbers[0],
        minor=numbers[1],
        patch=numbers[2],
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=match.group("build"),
    )


def render(version: SemanticVersion) -> str:
    text = f"{version.major}.{version.minor}.{version.patch}"
    if version.prerelease:
        text += "-" + ".".join(version.prerelease)
    if version.build:
        text += "+" + version.build
    return text


def increment(current: SemanticVersion, kind: BumpKind) -> SemanticVersion:
    """Derive the next version; ``current`` is never modified.

    Build metadata never survives an increment.
    """
    part = kind.part
    if part is Part.MAJOR:
        new = SemanticVersion(_bumped(current.major, current), 0, 0)
    elif part is Part.MINOR:
        new = SemanticVersion(current.major, _bumped(current.minor, current), 0)
    elif part is Part.PATCH:
        new = SemanticVersion(current.major, current.minor, _bumped(current.patch, current))
    elif part is Part.PRERELEASE:
        label = kind.label or ""
        if not PRERELEASE_RE.fullmatch(label):
            raise InvalidVersionFormat(label, field="prerelease")
        new = SemanticVersion(
            current.major,
            current.minor,
            current.patch,
            prerelease=tuple(label.split(".")),
        )
    elif part is Part.RELEASE:
        if not current.prerelease:
            raise InvalidVersionFormat(render(current), field="release")
        new = SemanticVersion(current.major, current.minor, current.patch)
    elif part is Part.EXPLICIT:
        if kind.version is None:
            raise InvalidVersionFormat("", field="new_version")
        new = kind.version
    else:  # pragma: no cover
        raise ValueError(f"Unsupported bump part: {part}")
    return new


def with_build(version: SemanticVersion, build: str | None) -> SemanticVersion:
    if not build:
        return version
    if not BUILD_RE.fullmatch(build):
        raise InvalidVersionFormat(build, field="build")
    return replace(version, build=build)


def select_bump_kind(
    *,
    major: bool = False,
    minor: bool = False,
    patch: bool = False,
    prerelease: str | None = None,
    release: bool = False,
    new_version: str | None = None,
) -> BumpKind:
    """Map the mutually exclusive bump selectors onto a single BumpKind."""
    selected: list[str] = []
    if major:
        selected.append("--major")
    if minor:
        selected.append("--minor")
    if patch:
        selected.append("--patch")
    if prerelease is not None:
        selected.append("--prerelease")
    if release:
        selected.append("--release")
    if new_version is not None:
        selected.append("--new-version")
    if len(selected) != 1:
        raise AmbiguousBumpKind(selected)

    if major:
        return BumpKind.major()
    if minor:
        return BumpKind.minor()
    if patch:
        return BumpKind.patch()
    if prerelease is not None:
        return BumpKind.prerelease(prerelease)
    if release:
        return BumpKind.release()
    return BumpKind.explicit(parse_version(str(new_version), field="new_version"))


def _bumped(value: int, current: SemanticVersion) -> int:
    if value >= MAX_COMPONENT:
        raise VersionOverflow(render(current))
    return value + 1
