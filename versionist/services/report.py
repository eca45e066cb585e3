from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from versionist.core.executor import BumpOutcome, OutcomeStatus
from versionist.core.rewriter import BumpResult, RewriteStatus

_STATUS_STYLE = {
    RewriteStatus.REWRITTEN: ("green", "rewritten"),
    RewriteStatus.NOT_FOUND: ("yellow", "no match"),
    RewriteStatus.IO_ERROR: ("red", "failed"),
}


def _display_path(path: Path, root: Path | None) -> str:
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return str(path)


def _result_to_dict(result: BumpResult, root: Path | None, *, contents: bool) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "path": _display_path(result.path, root),
        "status": result.status.value,
        "occurrences": result.occurrences,
    }
    if result.error:
        payload["error"] = result.error
    if contents and result.contents is not None:
        payload["contents"] = result.contents
    return payload


def outcome_to_dict(outcome: BumpOutcome, *, root: Path | None = None) -> dict[str, Any]:
    return {
        "status": outcome.status.value,
        "dry_run": outcome.dry_run,
        "current_version": str(outcome.current_version),
        "new_version": str(outcome.new_version),
        "files": [
            _result_to_dict(result, root, contents=outcome.dry_run)
            for result in outcome.results
        ],
        "config": (
            _result_to_dict(outcome.config_result, root, contents=False)
            if outcome.config_result is not None
            else None
        ),
        "failed": [_display_path(path, root) for path in outcome.failed_paths],
        "git_commit_message": outcome.commit_message,
        "git_tag": outcome.tag_name,
        "vcs_error": str(outcome.vcs_error) if outcome.vcs_error else None,
    }


def print_outcome(outcome: BumpOutcome, console: Console, *, root: Path | None = None) -> None:
    heading = f"{outcome.current_version} -> {outcome.new_version}"
    if outcome.dry_run:
        heading += " [dim](dry run)[/dim]"
    console.print(f"[bold cyan]Bump:[/bold cyan] {heading}")

    results = list(outcome.results)
    if outcome.config_result is not None:
        results.append(outcome.config_result)
    for result in results:
        style, label = _STATUS_STYLE[result.status]
        line = f"  [{style}]{label:<9}[/{style}] {escape(_display_path(result.path, root))}"
        if result.occurrences > 1:
            line += f" [dim]({result.occurrences} occurrences)[/dim]"
        if result.error:
            line += f" [red]{escape(result.error)}[/red]"
        console.print(line)

    if outcome.status is OutcomeStatus.NO_OP:
        console.print("[yellow]Warning:[/yellow] no configured file contained the current version:")
        for path in outcome.unmatched_paths:
            console.print(f"  - {escape(_display_path(path, root))}")
    elif outcome.status is OutcomeStatus.PARTIAL_FAILURE:
        console.print(
            "[red]Error:[/red] some files could not be rewritten; "
            "files already rewritten were kept, discard them with git if needed:"
        )
        for path in outcome.failed_paths:
            console.print(f"  - {escape(_display_path(path, root))}")

    if outcome.commit_message:
        console.print(f"[bold cyan]Commit:[/bold cyan] {escape(outcome.commit_message)}")
    if outcome.tag_name:
        console.print(f"[bold cyan]Tag:[/bold cyan] {escape(outcome.tag_name)}")
    if outcome.vcs_error is not None:
        console.print(f"[red]Git error:[/red] {escape(str(outcome.vcs_error))}")
