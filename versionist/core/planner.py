from __future__ import annotations

import logging
import re
from pathlib import Path

from versionist.core.config_model import BumpConfig
from versionist.core.errors import ConfigurationError, EmptyConfiguration, MalformedTemplate
from versionist.core.logging import get_logger, log_event
from versionist.core.templates import expand, expand_pattern, has_placeholder
from versionist.domain.rules import BumpPlan, FileRule, RewriteOperation
from versionist.domain.version import (
    BumpKind,
    SemanticVersion,
    increment,
    parse_version,
    with_build,
)

logger = get_logger(__name__)

# Matches the ``current_version = "..."`` assignment of the configuration file.
_CONFIG_SEARCH = r"""^(\s*current_version\s*=\s*["']){current_version}(["'])"""
_CONFIG_REPLACE = r"\g<1>{new_version}\g<2>"


class BumpPlanner:
    """Turn a configuration and a bump kind into ordered rewrite operations.

    Every configuration error surfaces here, before a single file is opened.
    """

    def plan(
        self,
        config: BumpConfig,
        kind: BumpKind,
        *,
        build: str | None = None,
    ) -> BumpPlan:
        current = parse_version(config.current_version, field="current_version")
        new = with_build(increment(current, kind), build)

        rules = config.file_rules()
        if not rules:
            raise EmptyConfiguration()

        operations = tuple(self._operation(config.root, rule, current, new) for rule in rules)
        self._reject_duplicates(rules, operations)
        config_operation = self._config_operation(config, operations, current, new)

        log_event(
            logger,
            "plan.created",
            current_version=str(current),
            new_version=str(new),
            files=[str(operation.path) for operation in operations],
        )
        return BumpPlan(
            current_version=current,
            new_version=new,
            operations=operations,
            config_operation=config_operation,
        )

    def _operation(
        self,
        root: Path,
        rule: FileRule,
        current: SemanticVersion,
        new: SemanticVersion,
    ) -> RewriteOperation:
        field = f"files.{rule.path}"
        if not has_placeholder(rule.search) and not has_placeholder(rule.replace):
            log_event(
                logger,
                "plan.rule_without_placeholder",
                level=logging.WARNING,
                path=rule.path,
            )

        replace = expand(rule.replace, current, new, field=f"{field}.replace")
        if rule.regex:
            search = expand_pattern(rule.search, current, new, field=f"{field}.search")
            try:
                # Compiling the replacement catches bad group references early.
                re.compile(search, re.MULTILINE).sub(replace, "")
            except re.error as exc:
                raise MalformedTemplate(rule.search, str(exc), field=field) from exc
        else:
            search = expand(rule.search, current, new, field=f"{field}.search")

        path = Path(rule.path)
        if not path.is_absolute():
            path = root / path
        return RewriteOperation(path=path, search=search, replace=replace, regex=rule.regex)

    def _reject_duplicates(
        self,
        rules: list[FileRule],
        operations: tuple[RewriteOperation, ...],
    ) -> None:
        # Each file is rewritten at most once per bump.
        seen: dict[Path, str] = {}
        for rule, operation in zip(rules, operations):
            resolved = operation.path.resolve()
            if resolved in seen:
                raise ConfigurationError(
                    code="duplicate_file",
                    message=f"'{rule.path}' names the same file as '{seen[resolved]}'",
                    field=f"files.{rule.path}",
                )
            seen[resolved] = rule.path

    def _config_operation(
        self,
        config: BumpConfig,
        operations: tuple[RewriteOperation, ...],
        current: SemanticVersion,
        new: SemanticVersion,
    ) -> RewriteOperation | None:
        if config.path is None:
            return None
        config_path = config.path.resolve()
        if any(operation.path.resolve() == config_path for operation in operations):
            # Already rewritten by a declared rule; a file is touched at most once.
            return None
        return RewriteOperation(
            path=config.path,
            search=expand_pattern(_CONFIG_SEARCH, current, new),
            replace=expand(_CONFIG_REPLACE, current, new),
            regex=True,
        )
