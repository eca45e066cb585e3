from __future__ import annotations

import re

from versionist.core.errors import MalformedTemplate
from versionist.domain.rules import (
    CURRENT_VERSION_PLACEHOLDER,
    NEW_VERSION_PLACEHOLDER,
)
from versionist.domain.version import SemanticVersion, render

_PLACEHOLDERS = (CURRENT_VERSION_PLACEHOLDER, NEW_VERSION_PLACEHOLDER)

# Anything shaped like ``{something_version}`` or an unterminated
# ``{current_version`` / ``{new_version``. Other braces are literal text.
_PLACEHOLDER_LIKE_RE = re.compile(r"\{\s*([A-Za-z_]*version)(?![A-Za-z0-9_])\s*(\}?)")


def has_placeholder(template: str) -> bool:
    return any(token in template for token in _PLACEHOLDERS)


def validate_template(template: str, *, field: str | None = None) -> None:
    for match in _PLACEHOLDER_LIKE_RE.finditer(template):
        token = match.group(0)
        if token in _PLACEHOLDERS:
            continue
        name = match.group(1)
        if not match.group(2):
            reason = f"unterminated placeholder '{{{name}'"
        else:
            reason = f"unknown placeholder '{token}'"
        raise MalformedTemplate(template, reason, field=field)


def expand(
    template: str,
    current: SemanticVersion,
    new: SemanticVersion,
    *,
    field: str | None = None,
) -> str:
    """Substitute both version placeholders; every other character is kept."""
    validate_template(template, field=field)
    return _substitute(template, render(current), render(new))


def expand_pattern(
    template: str,
    current: SemanticVersion,
    new: SemanticVersion,
    *,
    field: str | None = None,
) -> str:
    """Like :func:`expand`, with the version text escaped for ``re``."""
    validate_template(template, field=field)
    return _substitute(template, re.escape(render(current)), re.escape(render(new)))


def _substitute(template: str, current_text: str, new_text: str) -> str:
    # Split first so a substituted value is never scanned for placeholders.
    pieces = template.split(CURRENT_VERSION_PLACEHOLDER)
    pieces = [piece.replace(NEW_VERSION_PLACEHOLDER, new_text) for piece in pieces]
    return current_text.join(pieces)
