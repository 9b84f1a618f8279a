"""CLI entrypoints for bindtree commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .naming import NameCollisionError
from .orchestrator import Orchestrator
from .report import format_summary
from .scaffold import ModulePathConflictError
from .translator import TranslatorUnavailableError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase console log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_tree_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory holding .bindtree.yml (defaults to current directory).",
    )
    parser.add_argument(
        "--source",
        help="Header tree to read (overrides source_root).",
    )
    parser.add_argument(
        "--output",
        help="Module tree to rebuild (overrides output_root).",
    )
    parser.add_argument(
        "--max-files",
        type=int,
        help="Stop after considering this many files.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bindtree",
        description="Regenerate a nested binding module tree from a header tree.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Wipe the output tree and regenerate one module per header.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    _add_tree_options(sync_parser)
    sync_parser.add_argument(
        "--log-file",
        help="Run log path (overrides log_file; truncated on every run).",
    )

    plan_parser = subparsers.add_parser(
        "plan",
        help="List header to module mappings without touching the output tree.",
    )
    _add_verbose_option(plan_parser, suppress_default=True)
    _add_tree_options(plan_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for bindtree commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    verbose = bool(getattr(args, "verbose", False))

    orchestrator = Orchestrator()
    try:
        config = orchestrator.load(
            args.path,
            source_root=args.source,
            output_root=args.output,
            log_file=getattr(args, "log_file", None),
            max_files=args.max_files,
        )
    except ConfigError as exc:
        parser.exit(1, f"bindtree: invalid configuration: {exc}\n")

    if args.command == "sync":
        configure_logging(verbose=verbose, log_file=config.log_file)
        try:
            summary = orchestrator.run(config)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (
            ModulePathConflictError,
            NameCollisionError,
            TranslatorUnavailableError,
        ) as exc:
            parser.exit(1, f"bindtree sync failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"bindtree sync failed: {exc}\nRun with --verbose for more details.\n")
        print(format_summary(summary))
    elif args.command == "plan":
        configure_logging(verbose=verbose)
        try:
            plan = orchestrator.plan(config)
        except OSError as exc:
            parser.exit(1, f"{exc}\n")
        for task in plan.tasks:
            print(f"{task.source_rel_path} -> {_relativize(task.dest_path)}")
        for collision in plan.collisions:
            print(
                f"collision: {collision.dest_rel_path} <- "
                f"{collision.first_source}, {collision.second_source}"
            )
        print(
            f"{len(plan.tasks)} headers, {len(plan.skipped)} skipped, "
            f"{len(plan.collisions)} collisions"
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
