from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from versionist import __version__
from versionist.core.config import get_runtime_config
from versionist.core.config_store import CONFIG_FILENAME, ConfigStore
from versionist.core.errors import (
    EXIT_CONFIGURATION,
    EXIT_UNEXPECTED,
    VersionistError,
    format_error,
    wrap_error,
)
from versionist.core.executor import BumpExecutor
from versionist.core.logging import configure_logging, get_logger
from versionist.core.planner import BumpPlanner
from versionist.domain.version import select_bump_kind
from versionist.services.git_gateway import GitGateway
from versionist.services.report import outcome_to_dict, print_outcome

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="versionist",
        description="Bump a semantic version across every file that embeds it.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Print version and exit.",
    )

    subparsers = parser.add_subparsers(dest="command")

    bump_parser = subparsers.add_parser(
        "bump",
        help="Increment the version and rewrite the configured files.",
    )
    selectors = bump_parser.add_argument_group(
        "bump kind",
        "Exactly one of these is required.",
    )
    selectors.add_argument("--major", action="store_true", help="Increment major.")
    selectors.add_argument("--minor", action="store_true", help="Increment minor.")
    selectors.add_argument("--patch", action="store_true", help="Increment patch.")
    selectors.add_argument(
        "--prerelease",
        metavar="LABEL",
        help="Set the prerelease label (e.g. rc.1), keeping MAJOR.MINOR.PATCH.",
    )
    selectors.add_argument(
        "--release",
        action="store_true",
        help="Drop the prerelease label.",
    )
    selectors.add_argument(
        "--new-version",
        metavar="X.Y.Z",
        help="Use this exact version instead of incrementing.",
    )
    bump_parser.add_argument(
        "--build",
        metavar="META",
        help="Attach build metadata to the new version.",
    )
    bump_parser.add_argument(
        "-c",
        "--config",
        help=f"Configuration file (default: ./{CONFIG_FILENAME}).",
    )
    bump_parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Report the intended changes without writing anything.",
    )
    bump_parser.add_argument(
        "--commit",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Commit the rewritten files (overrides the configuration).",
    )
    bump_parser.add_argument(
        "--tag",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Tag the new version (overrides the configuration).",
    )
    bump_parser.add_argument(
        "-m",
        "--commit-message",
        help="Commit message template (default: 'bump {current_version} -> {new_version}').",
    )
    bump_parser.add_argument(
        "--allow-dirty",
        action="store_true",
        help="Commit or tag even if the git working tree has changes.",
    )
    bump_parser.add_argument(
        "-o",
        "--output",
        choices=("text", "json"),
        default="text",
        help="Report format (default: text).",
    )
    bump_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every step to stderr.",
    )
    bump_parser.set_defaults(handler=handle_bump)

    config_parser = subparsers.add_parser(
        "print-config",
        help="Print the resolved runtime settings and configuration as JSON.",
    )
    config_parser.add_argument(
        "-c",
        "--config",
        help=f"Configuration file (default: ./{CONFIG_FILENAME}).",
    )
    config_parser.set_defaults(handler=handle_print_config)

    return parser


def _config_path(args: argparse.Namespace) -> Path:
    if args.config:
        return Path(args.config).expanduser()
    runtime = get_runtime_config()
    if runtime.config is not None:
        return runtime.config.expanduser()
    return Path(CONFIG_FILENAME)


def _configure_logging(args: argparse.Namespace) -> None:
    runtime = get_runtime_config()
    if getattr(args, "verbose", False):
        configure_logging(level="info", format_name=runtime.log_format, stream=sys.stderr)
    else:
        configure_logging(
            level=runtime.log_level,
            format_name=runtime.log_format,
            log_dir=runtime.log_dir,
        )


def handle_bump(args: argparse.Namespace) -> int:
    kind = select_bump_kind(
        major=args.major,
        minor=args.minor,
        patch=args.patch,
        prerelease=args.prerelease,
        release=args.release,
        new_version=args.new_version,
    )
    runtime = get_runtime_config()
    config = ConfigStore(_config_path(args), runtime.config_overrides()).load()
    plan = BumpPlanner().plan(config, kind, build=args.build)

    commit = config.commit if args.commit is None else args.commit
    tag = config.tag if args.tag is None else args.tag

    vcs = None
    if (commit or tag) and not args.dry_run:
        gateway = GitGateway(config.root)
        if not args.allow_dirty:
            gateway.ensure_clean()
        vcs = gateway

    executor = BumpExecutor(vcs=vcs, dry_run=args.dry_run)
    outcome = executor.execute(
        plan,
        commit=commit,
        tag=tag,
        commit_message=args.commit_message or config.commit_message,
        tag_name=config.tag_name,
        tag_message=config.tag_message,
    )

    if args.output == "json":
        print(json.dumps(outcome_to_dict(outcome, root=config.root), indent=2))
    else:
        print_outcome(outcome, Console(soft_wrap=True), root=config.root)
    return outcome.exit_code


def handle_print_config(args: argparse.Namespace) -> int:
    runtime = get_runtime_config()
    config = ConfigStore(_config_path(args), runtime.config_overrides()).load()
    payload = {
        "runtime": runtime.model_dump(mode="json"),
        "config_path": str(config.path),
        "config": config.model_dump(mode="json"),
    }
    print(json.dumps(payload, indent=2))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        return EXIT_CONFIGURATION

    _configure_logging(args)
    errors = Console(stderr=True, soft_wrap=True)
    try:
        return args.handler(args)
    except VersionistError as exc:
        text = format_error(exc)
        errors.print(f"[red]Error:[/red] {escape(text)}", highlight=False)
        return exc.exit_code
    except Exception as exc:
        logger.exception("Unexpected failure")
        error = wrap_error(exc, code="unexpected", message="Unexpected failure")
        text = format_error(error)
        errors.print(f"[red]Error:[/red] {escape(text)}", highlight=False)
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    raise SystemExit(main())
