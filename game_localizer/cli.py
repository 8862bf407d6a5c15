#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
localize-games — turn iframe-wrapped games into offline-playable copies

    localize-games <game-id> [game-id ...]
    localize-games --all
    localize-games --scan
    localize-games --restore [game-id ... | --all]     (alias: --undo)

The original wrapper page is kept as index.html.backup; --restore puts it back.
"""

import argparse
import sys
from functools import partial
from pathlib import Path

from . import config
from .fetcher import Fetcher
from .localize import (list_game_ids, localize_game, restore_game, run_batch,
                       scan_iframe_games, skip_localized, summarize)
from .logging_config import setup_logger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="localize-games",
        description="Download iframe-embedded games and their assets for offline play.")
    ap.add_argument("game_ids", nargs="*", metavar="game-id", help="Game directory names")
    ap.add_argument("--all", action="store_true", help="Process every game directory")
    ap.add_argument("--restore", "--undo", dest="restore", action="store_true",
                    help="Restore index.html from index.html.backup (all games if no ids given)")
    ap.add_argument("--scan", action="store_true", help="List games that are still iframe wrappers")
    ap.add_argument("--games-dir", type=Path, default=config.DEFAULT_GAMES_DIR,
                    help="Directory holding one folder per game (default: %(default)s)")
    ap.add_argument("--delay", type=float, default=config.GAME_DELAY,
                    help="Seconds to wait between games (default: %(default)s)")
    ap.add_argument("--timeout", type=float, default=config.REQUEST_TIMEOUT,
                    help="Per-request timeout in seconds (default: %(default)s)")
    ap.add_argument("--log-file", default=None, help="Also write a debug log to this file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def print_summary(results, label="Summary"):
    s = summarize(results)
    print("=" * 50)
    print(f"{label}: {s['success']} succeeded, {s['failed']} failed, {s['skipped']} skipped")


def run(args) -> int:
    games_dir = args.games_dir

    if args.scan:
        found = scan_iframe_games(games_dir)
        print(f"Found {len(found)} iframe games:")
        for game_id in found:
            print(f"  - {game_id}")
        if found:
            print(f"\nTo localize all: localize-games {' '.join(found)}")
        return 0

    if args.restore:
        game_ids = args.game_ids if args.game_ids and not args.all else list_game_ids(games_dir)
        print(f"Restoring {len(game_ids)} game(s) from backup...\n")
        results = run_batch(game_ids, partial(restore_game, games_dir=games_dir))
        print_summary(results)
        return 0

    skipped = []
    if args.all:
        game_ids, skipped = skip_localized(list_game_ids(games_dir), games_dir)
        print(f"Found {len(game_ids) + len(skipped)} games, {len(game_ids)} to process\n")
    elif args.game_ids:
        game_ids = args.game_ids
    else:
        build_parser().print_usage(sys.stderr)
        print("error: give one or more game ids, --all, --scan or --restore", file=sys.stderr)
        return 1

    fetcher = Fetcher(timeout=args.timeout)
    try:
        results = run_batch(game_ids, partial(localize_game, games_dir=games_dir, fetcher=fetcher),
                            delay=args.delay)
    finally:
        fetcher.close()
    print_summary(skipped + results)
    print(f"\nTip: original files are backed up as {config.BACKUP_NAME}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger("DEBUG" if args.verbose else "INFO", log_file=args.log_file)
    try:
        return run(args)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
