from .rules import BumpPlan, FileRule, RewriteOperation
from .version import (
    BumpKind,
    Part,
    SemanticVersion,
    increment,
    parse_version,
    render,
    select_bump_kind,
    with_build,
)

__all__ = [
    "BumpKind",
    "BumpPlan",
    "FileRule",
    "Part",
    "RewriteOperation",
    "SemanticVersion",
    "increment",
    "parse_version",
    "render",
    "select_bump_kind",
    "with_build",
]
