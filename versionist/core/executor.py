from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from versionist.core.config_model import DEFAULT_COMMIT_MESSAGE, DEFAULT_TAG_NAME
from versionist.core.errors import (
    EXIT_OK,
    EXIT_PARTIAL_FAILURE,
    EXIT_VCS,
    VcsError,
)
from versionist.core.logging import get_logger, log_event
from versionist.core.protocols import VcsGateway
from versionist.core.rewriter import BumpResult, FileRewriter, RewriteStatus
from versionist.core.templates import expand
from versionist.domain.rules import BumpPlan, RewriteOperation
from versionist.domain.version import SemanticVersion

logger = get_logger(__name__)


class OutcomeStatus(Enum):
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    NO_OP = "no_op"


@dataclass
class BumpOutcome:
    status: OutcomeStatus
    current_version: SemanticVersion
    new_version: SemanticVersion
    results: list[BumpResult] = field(default_factory=list)
    config_result: BumpResult | None = None
    dry_run: bool = False
    commit_message: str | None = None
    tag_name: str | None = None
    vcs_error: VcsError | None = None

    def _all_results(self) -> list[BumpResult]:
        if self.config_result is None:
            return list(self.results)
        return [*self.results, self.config_result]

    @property
    def failed_paths(self) -> list[Path]:
        return [
            result.path
            for result in self._all_results()
            if result.status is RewriteStatus.IO_ERROR
        ]

    @property
    def rewritten_paths(self) -> list[Path]:
        return [
            result.path
            for result in self._all_results()
            if result.status is RewriteStatus.REWRITTEN
        ]

    @property
    def unmatched_paths(self) -> list[Path]:
        return [
            result.path
            for result in self.results
            if result.status is RewriteStatus.NOT_FOUND
        ]

    @property
    def exit_code(self) -> int:
        if self.status is OutcomeStatus.PARTIAL_FAILURE:
            return EXIT_PARTIAL_FAILURE
        if self.vcs_error is not None:
            return EXIT_VCS
        return EXIT_OK


def summarize(results: list[BumpResult]) -> OutcomeStatus:
    if any(result.status is RewriteStatus.IO_ERROR for result in results):
        return OutcomeStatus.PARTIAL_FAILURE
    if any(result.status is RewriteStatus.REWRITTEN for result in results):
        return OutcomeStatus.SUCCESS
    return OutcomeStatus.NO_OP


class BumpExecutor:
    """Apply a :class:`BumpPlan` file by file, then record it in version control.

    Operations run strictly in plan order and a failing file never stops the
    remaining ones. Files already rewritten are not rolled back; version
    control is the recovery path.
    """

    def __init__(
        self,
        rewriter: FileRewriter | None = None,
        vcs: VcsGateway | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self._rewriter = rewriter or FileRewriter()
        self._vcs = vcs
        self._dry_run = dry_run

    def execute(
        self,
        plan: BumpPlan,
        *,
        commit: bool = False,
        tag: bool = False,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
        tag_name: str = DEFAULT_TAG_NAME,
        tag_message: str | None = None,
    ) -> BumpOutcome:
        current, new = plan.current_version, plan.new_version
        # Expanded up front so a bad template fails before any file changes.
        message = expand(commit_message, current, new, field="commit_message")
        name = expand(tag_name, current, new, field="tag_name")
        annotation = expand(tag_message, current, new, field="tag_message") if tag_message else name

        results = [self._apply(operation) for operation in plan.operations]
        outcome = BumpOutcome(
            status=summarize(results),
            current_version=current,
            new_version=new,
            results=results,
            dry_run=self._dry_run,
        )

        if outcome.status is OutcomeStatus.SUCCESS and plan.config_operation is not None:
            outcome.config_result = self._apply(plan.config_operation)
            if outcome.config_result.status is RewriteStatus.IO_ERROR:
                outcome.status = OutcomeStatus.PARTIAL_FAILURE

        if outcome.status is OutcomeStatus.NO_OP:
            log_event(
                logger,
                "execute.no_op",
                level=logging.WARNING,
                paths=[str(path) for path in outcome.unmatched_paths],
            )
        elif outcome.status is OutcomeStatus.PARTIAL_FAILURE:
            log_event(
                logger,
                "execute.partial_failure",
                level=logging.ERROR,
                paths=[str(path) for path in outcome.failed_paths],
            )
        elif not self._dry_run and self._vcs is not None:
            self._record(
                self._vcs,
                outcome,
                commit=commit,
                tag=tag,
                message=message,
                name=name,
                annotation=annotation,
            )

        log_event(
            logger,
            "execute.outcome",
            status=outcome.status.value,
            new_version=str(new),
            dry_run=self._dry_run,
        )
        return outcome

    def _apply(self, operation: RewriteOperation) -> BumpResult:
        return self._rewriter.rewrite(
            operation.path,
            operation.search,
            operation.replace,
            regex=operation.regex,
            dry_run=self._dry_run,
        )

    def _record(
        self,
        vcs: VcsGateway,
        outcome: BumpOutcome,
        *,
        commit: bool,
        tag: bool,
        message: str,
        name: str,
        annotation: str,
    ) -> None:
        try:
            if commit:
                paths = outcome.rewritten_paths
                vcs.stage(paths)
                log_event(logger, "vcs.stage", paths=[str(path) for path in paths])
                vcs.commit(message)
                outcome.commit_message = message
                log_event(logger, "vcs.commit", message=message)
            if tag:
                vcs.tag(name, annotation)
                outcome.tag_name = name
                log_event(logger, "vcs.tag", name=name)
        except VcsError as exc:
            outcome.vcs_error = exc
            log_event(logger, "vcs.failed", level=logging.ERROR, code=exc.code, error=str(exc))
