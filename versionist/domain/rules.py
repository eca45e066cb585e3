from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from versionist.domain.version import SemanticVersion

CURRENT_VERSION_PLACEHOLDER = "{current_version}"
NEW_VERSION_PLACEHOLDER = "{new_version}"


@dataclass(frozen=True)
class FileRule:
    path: str
    search: str = CURRENT_VERSION_PLACEHOLDER
    replace: str = NEW_VERSION_PLACEHOLDER
    regex: bool = False


@dataclass(frozen=True)
class RewriteOperation:
    path: Path
    search: str
    replace: str
    regex: bool = False


@dataclass(frozen=True)
class BumpPlan:
    current_version: SemanticVersion
    new_version: SemanticVersion
    operations: tuple[RewriteOperation, ...] = field(default_factory=tuple)
    config_operation: Optional[RewriteOperation] = None
