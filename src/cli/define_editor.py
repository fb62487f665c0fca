# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command-line define editor: scan, list, toggle and ignore-path commands."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from sdefs.build_target import BuildTarget, parse_build_target, target_to_group
from sdefs.database import SQLitePreferenceStore
from sdefs.defines import PendingChanges, format_define_list
from sdefs.model import ScanResult
from sdefs.preferences import Preferences, PreferencesError
from sdefs.scanner import (
    DEFAULT_EXTENSIONS,
    DEFAULT_MARKERS,
    DefineScanner,
    ScanCancelledError,
)

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = ".sdefs.sqlite"
EXIT_CANCELED = 130


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    common = _common_options(suppress_defaults=False)
    # Nested actions must not reset options given before the action name.
    nested_common = _common_options(suppress_defaults=True)

    parser = argparse.ArgumentParser(prog="sdefs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", parents=[common])
    scan_parser.add_argument("--path", required=True, help="Project root to scan.")
    scan_parser.add_argument(
        "--marker",
        action="append",
        dest="markers",
        help="Directive marker to search for; repeatable.",
    )
    scan_parser.add_argument(
        "--extension",
        action="append",
        dest="extensions",
        help="Source file suffix to scan; repeatable.",
    )
    scan_parser.add_argument(
        "--format", choices=("table", "json"), default="table", help="Output format."
    )

    list_parser = subparsers.add_parser("list", parents=[common])
    list_parser.add_argument("--target", required=False, help="Build target name.")
    list_parser.add_argument(
        "--format", choices=("table", "json"), default="table", help="Output format."
    )

    apply_parser = subparsers.add_parser("apply", parents=[common])
    apply_parser.add_argument("--target", required=False, help="Build target name.")
    apply_parser.add_argument(
        "--enable", action="append", default=[], help="Define to enable; repeatable."
    )
    apply_parser.add_argument(
        "--disable", action="append", default=[], help="Define to disable; repeatable."
    )

    ignore_parser = subparsers.add_parser("ignore-path", parents=[common])
    ignore_actions = ignore_parser.add_subparsers(dest="action", required=True)
    ignore_actions.add_parser("list", parents=[nested_common])
    add_parser = ignore_actions.add_parser("add", parents=[nested_common])
    add_parser.add_argument("path", help="Project-relative path to ignore.")
    remove_parser = ignore_actions.add_parser("remove", parents=[nested_common])
    remove_parser.add_argument("path", help="Project-relative path to stop ignoring.")

    target_parser = subparsers.add_parser("target", parents=[common])
    target_parser.add_argument(
        "name", nargs="?", help="Build target to activate; omit to show."
    )
    return parser


def _common_options(suppress_defaults: bool) -> argparse.ArgumentParser:
    """Build the options shared by every command.

    Args:
        suppress_defaults: Leave unset options out of the namespace.

    Returns:
        Parent parser holding the shared options.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--db",
        required=False,
        default=argparse.SUPPRESS if suppress_defaults else None,
        help=f"Preference database path (default: ./{DEFAULT_DB_NAME}).",
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_defaults else False,
        help="Enable debug logging.",
    )
    return common


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    db_path = Path(args.db) if args.db else Path.cwd() / DEFAULT_DB_NAME
    try:
        preferences = Preferences(SQLitePreferenceStore(db_path=db_path))
        if args.command == "scan":
            return _run_scan(
                args=args, preferences=preferences, stdout=stdout, stderr=stderr
            )
        if args.command == "list":
            return _run_list(
                args=args, preferences=preferences, stdout=stdout, stderr=stderr
            )
        if args.command == "apply":
            return _run_apply(
                args=args, preferences=preferences, stdout=stdout, stderr=stderr
            )
        if args.command == "ignore-path":
            return _run_ignore_path(args=args, preferences=preferences, stdout=stdout)
        if args.command == "target":
            return _run_target(
                args=args, preferences=preferences, stdout=stdout, stderr=stderr
            )
    except PreferencesError as exc:
        logger.warning(f"Preference store failed (db_path={db_path} error={exc})")
        stderr.write(f"Preference store failed: {exc}\n")
        return 2

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_scan(
    args: argparse.Namespace,
    preferences: Preferences,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run scan command.

    Args:
        args: Parsed CLI arguments.
        preferences: Define editor preferences.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    root_path = Path(args.path)
    if not root_path.is_dir():
        logger.warning(f"Path is not a directory (path={root_path})")
        stderr.write(f"Path is not a directory: {root_path}\n")
        return 2

    try:
        markers = DEFAULT_MARKERS if args.markers is None else args.markers
        extensions = (
            DEFAULT_EXTENSIONS if args.extensions is None else args.extensions
        )
        scanner = DefineScanner(markers=markers, extensions=extensions)
    except ValueError as exc:
        logger.warning(f"Invalid scan option (error={exc})")
        stderr.write(f"Invalid scan option: {exc}\n")
        return 2
    result = ScanResult()
    preferences.set_cached_defines([])
    progress_console = Console(file=stderr, force_terminal=False)
    try:
        with Progress(
            TextColumn("Parsing scripts for preprocessor defines"),
            BarColumn(),
            TextColumn("{task.description}", markup=False),
            console=progress_console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("", total=1.0)

            def _update(fraction: float, relative_path: str) -> bool:
                progress.update(task_id, completed=fraction, description=relative_path)
                return True

            scanner.scan(
                root_path=root_path,
                ignored_paths=preferences.ignored_paths(),
                result=result,
                progress=_update,
            )
    except (KeyboardInterrupt, ScanCancelledError):
        logger.warning(
            f"Scan canceled (path={root_path} files_scanned={result.files_scanned})"
        )
        stderr.write("Scan canceled\n")
        return EXIT_CANCELED

    defines = result.sorted_defines()
    preferences.set_cached_defines(defines)
    for error in result.errors:
        stderr.write(f"scan_error: {error}\n")

    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    if args.format == "json":
        payload = {
            "defines": defines,
            "errors": [asdict(error) for error in result.errors],
        }
        console.print(
            json.dumps(payload, indent=2, sort_keys=True),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return 0

    table = Table(title=f"Defines ({len(defines)})", show_header=True, expand=False)
    table.add_column("define", overflow="fold")
    for name in defines:
        table.add_row(name)
    console.print(table)
    console.print(
        f"files_scanned={result.files_scanned} symbols_found={result.symbols_found} "
        f"errors={len(result.errors)}",
        markup=False,
        highlight=False,
    )
    return 0


def _run_list(
    args: argparse.Namespace,
    preferences: Preferences,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run list command.

    Args:
        args: Parsed CLI arguments.
        preferences: Define editor preferences.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    target = _resolve_target(args.target, preferences=preferences, stderr=stderr)
    if target is None:
        return 2
    group = target_to_group(target)
    enabled = preferences.enabled_defines(group)
    defines = preferences.cached_defines()

    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    if args.format == "json":
        payload = {
            "target": target.value,
            "group": group.value,
            "defines": [{"name": name, "enabled": name in enabled} for name in defines],
        }
        console.print(
            json.dumps(payload, indent=2, sort_keys=True),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return 0

    table = Table(
        title=f"Defines ({len(defines)}) target={target.value} group={group.value}",
        show_header=True,
    )
    table.add_column("enabled", justify="center")
    table.add_column("define", overflow="fold")
    for name in defines:
        table.add_row("x" if name in enabled else "", name)
    console.print(table)
    return 0


def _run_apply(
    args: argparse.Namespace,
    preferences: Preferences,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run apply command.

    Args:
        args: Parsed CLI arguments.
        preferences: Define editor preferences.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    target = _resolve_target(args.target, preferences=preferences, stderr=stderr)
    if target is None:
        return 2
    group = target_to_group(target)
    enabled = preferences.enabled_defines(group)

    changes = PendingChanges()
    for name in args.enable:
        changes.enable(name)
    for name in args.disable:
        changes.disable(name)

    console = Console(file=stdout, force_terminal=False)
    change_count = changes.change_count
    console.print(f"Changes: {change_count}", markup=False, highlight=False)
    if change_count == 0:
        return 0

    updated = changes.apply(enabled)
    written = preferences.set_enabled_defines(group, updated)
    console.print(
        f"group={group.value} written={str(written).lower()} defines={format_define_list(updated)}",
        markup=False,
        highlight=False,
    )
    return 0


def _run_ignore_path(
    args: argparse.Namespace, preferences: Preferences, stdout: TextIO
) -> int:
    """Run ignore-path command.

    Args:
        args: Parsed CLI arguments.
        preferences: Define editor preferences.
        stdout: Standard output stream.

    Returns:
        Exit code.
    """
    console = Console(file=stdout, force_terminal=False)
    if args.action == "add":
        changed = preferences.ignore_path(args.path)
        logger.info(f"Ignore path add (path={args.path} changed={changed})")
    elif args.action == "remove":
        changed = preferences.unignore_path(args.path)
        logger.info(f"Ignore path remove (path={args.path} changed={changed})")

    for path in preferences.ignored_paths():
        console.print(path, markup=False, highlight=False)
    return 0


def _run_target(
    args: argparse.Namespace,
    preferences: Preferences,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run target command.

    Args:
        args: Parsed CLI arguments.
        preferences: Define editor preferences.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    if args.name:
        target = _resolve_target(args.name, preferences=preferences, stderr=stderr)
        if target is None:
            return 2
        preferences.set_active_build_target(target)
    else:
        target = preferences.active_build_target()

    console = Console(file=stdout, force_terminal=False)
    console.print(
        f"target={target.value} group={target_to_group(target).value}",
        markup=False,
        highlight=False,
    )
    return 0


def _resolve_target(
    name: str | None, preferences: Preferences, stderr: TextIO
) -> BuildTarget | None:
    """Resolve a target argument, falling back to the active target.

    Args:
        name: Target name from the command line, if any.
        preferences: Define editor preferences.
        stderr: Standard error stream.

    Returns:
        Resolved target, or ``None`` after reporting an invalid name.
    """
    if not name:
        return preferences.active_build_target()
    try:
        return parse_build_target(name)
    except ValueError as exc:
        logger.warning(f"Invalid build target (target={name} error={exc})")
        stderr.write(f"Invalid build target: {name}\n")
        return None


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
