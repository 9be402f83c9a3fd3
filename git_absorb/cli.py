from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from .absorb import AbsorptionResult, absorb_folders
from .cleanup import clean_folders
from .folders import GitAbsorbError, RunOptions, SourceFolder, UsageError, resolve_folders
from .reporting import summarize_cli, write_json_report


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)

    def check_tokens(self, argv: Sequence[str]) -> None:
        """Reject option-looking tokens that are not spelled out exactly, in order."""
        tokens = iter(argv)
        for token in tokens:
            if not token.startswith("-"):
                continue
            if token == "--":
                self.error("the '--' separator is not supported")
            option, has_value, _ = token.partition("=")
            action = self._option_string_actions.get(option)
            if action is None or (has_value and action.nargs == 0):
                self.error(f"unrecognized arguments: {token}")
            if action.dest == "help":
                return
            if action.nargs is None and not has_value:
                next(tokens, None)


def build_parser() -> _ArgumentParser:
    parser = _ArgumentParser(
        prog="git absorb",
        allow_abbrev=False,
        usage="%(prog)s [FOLDER ...] [OPTIONS]",
        description=(
            "Merge other repositories into the current one, keeping their history "
            "and placing each under a subdirectory named after its folder."
        ),
    )
    parser.add_argument(
        "folders",
        nargs="*",
        metavar="FOLDER",
        help="Repositories to absorb, in order. Options must follow the folders.",
    )
    parser.add_argument(
        "-c",
        "--clean",
        action="store_true",
        help="Delete the local copies of absorbed repositories afterwards.",
    )
    parser.add_argument(
        "-b",
        "--branch",
        help="Branch to fetch from every folder (default: its HEAD branch, else master).",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Describe the actions without changing anything.",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first folder that cannot be absorbed.",
    )
    parser.add_argument(
        "--report",
        type=Path,
        help="Write a JSON report of the run to this path.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def parse_arguments(
    parser: _ArgumentParser,
    argv: Sequence[str],
    cwd: Path,
) -> tuple[List[SourceFolder], RunOptions]:
    parser.check_tokens(argv)
    args = parser.parse_args(list(argv))
    if not args.folders or argv[0].startswith("-"):
        raise UsageError("no source folder provided")
    folders = resolve_folders(args.folders, cwd)
    options = RunOptions(
        clean=args.clean,
        dry_run=args.dry_run,
        branch=args.branch,
        fail_fast=args.fail_fast,
        report=args.report,
        verbose=args.verbose,
    )
    return folders, options


def run(folders: Sequence[SourceFolder], options: RunOptions, cwd: Path) -> int:
    logging.debug("Options: %s", options)
    absorptions = absorb_folders(folders, cwd, options)

    cleanups = None
    if options.clean:
        cleanups = clean_folders(absorptions, dry_run=options.dry_run)

    logging.info("\n%s", summarize_cli(absorptions, cleanups, dry_run=options.dry_run))
    if options.report:
        write_json_report(options.report, absorptions, cleanups)

    failed = _failed(absorptions)
    if failed:
        logging.error("Not absorbed: %s", ", ".join(result.name for result in failed))
        return 1
    return 0


def _failed(results: Sequence[AbsorptionResult]) -> List[AbsorptionResult]:
    return [result for result in results if not result.succeeded]


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    cwd = Path.cwd()
    try:
        folders, options = parse_arguments(parser, argv, cwd)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return 1

    configure_logging(options.verbose)
    try:
        return run(folders, options, cwd)
    except GitAbsorbError as exc:
        logging.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logging.error("Interrupted")
        return 130


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
