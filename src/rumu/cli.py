"""Command-line interface for rumu."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sqlite3
import sys
import threading
from types import TracebackType
from typing import Iterable, Optional, Tuple

from rumu.config import AppConfig, load_config
from rumu.logging_setup import init_logging
from rumu.metadata import sync_library
from rumu.player_vlc import VlcPlayer
from rumu.songdb import SongDB

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(prog="rumu", description="rumu music player")
    parser.add_argument(
        "--db",
        default=None,
        help="Path to the song database (defaults to the config directory)",
    )
    parser.add_argument(
        "--scan",
        nargs="?",
        const="",
        default=None,
        metavar="DIR",
        help=(
            "Scan DIR and sync it into the database before starting; "
            "without DIR the configured music_dir is used"
        ),
    )
    parser.add_argument(
        "--prune",
        action="store_true",
        help="Drop database entries whose files no longer exist",
    )
    parser.add_argument(
        "--no-tui",
        action="store_true",
        help="Only scan/prune, do not start the player",
    )
    return parser


def _install_excepthooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    if hasattr(threading, "excepthook"):

        def thread_hook(args: threading.ExceptHookArgs) -> None:
            exc_value = args.exc_value or RuntimeError("unknown")
            exc_info: Tuple[
                type[BaseException], BaseException, Optional[TracebackType]
            ] = (
                args.exc_type,
                exc_value,
                args.exc_traceback,
            )
            thread_name = args.thread.name if args.thread else "thread"
            logger.exception("Thread exception in %s", thread_name, exc_info=exc_info)

        threading.excepthook = thread_hook


def _resolve_db_path(arg: Optional[str], config: AppConfig) -> Optional[Path]:
    raw = arg or config.db_path
    return Path(raw).expanduser() if raw else None


def _resolve_scan_dir(scan: Optional[str], config: AppConfig) -> Optional[str]:
    if scan is None:
        return None
    return scan or config.music_dir or ""


def _prepare_library(db: SongDB, scan: Optional[str], prune: bool) -> int:
    if scan == "":
        print("No DIR given and no music_dir configured", file=sys.stderr)
        return 1
    if scan:
        directory = Path(scan).expanduser()
        if not directory.is_dir():
            print(f"Not a directory: {directory}", file=sys.stderr)
            return 1
        report = sync_library(db, directory)
        print(
            f"Scanned {directory}: {report.added} added, {report.updated} updated, "
            f"{report.unchanged} unchanged, {report.pruned} pruned"
        )
    elif prune:
        removed = db.prune()
        print(f"Pruned {removed} missing songs")
    return 0


def _run_tui(player: VlcPlayer, db: SongDB, config: AppConfig) -> int:
    try:
        from rumu.tui import run_tui
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(player, db, config=config)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()
    logger.info("App start")
    _install_excepthooks()

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = load_config()

    try:
        db = SongDB(_resolve_db_path(args.db, config))
    except (OSError, sqlite3.Error) as exc:
        logger.exception("Failed to open song database")
        print(f"Cannot open song database: {exc}", file=sys.stderr)
        return 1

    try:
        exit_code = _prepare_library(
            db, _resolve_scan_dir(args.scan, config), args.prune
        )
        if exit_code or args.no_tui:
            return exit_code
        try:
            player = VlcPlayer()
        except RuntimeError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        exit_code = _run_tui(player, db, config)
        logger.info("App exit code=%s", exit_code)
        return exit_code
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
