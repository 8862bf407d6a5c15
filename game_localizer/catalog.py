#!/usr/bin/env python3
"""
Game catalog: enumerate games/html/<id>/metadata.json and write the
games-list.json / games-metadata.json files the frontend reads.

Usage:
    generate-games-list [--games-dir games/html]
"""

import argparse
import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Optional

from . import config
from .localize import list_game_ids
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class GameMetadata:
    id: str
    name: str = ""
    author: str = ""
    description: str = ""
    thumbnail: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "GameMetadata":
        return cls(**{k: str(data.get(k, "") or "") for k in cls.__dataclass_fields__})

    def to_dict(self) -> dict:
        return asdict(self)


def listed_game_ids(games_dir: Path) -> List[str]:
    """Ids of the game directories that carry a metadata.json."""
    return [g for g in list_game_ids(games_dir)
            if (Path(games_dir) / g / config.METADATA_NAME).is_file()]


def load_metadata(games_dir: Path, game_id: str) -> Optional[GameMetadata]:
    path = Path(games_dir) / game_id / config.METADATA_NAME
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading metadata for {game_id}: {e}")
        return None
    if not isinstance(data, dict):
        logger.error(f"Error reading metadata for {game_id}: not a JSON object")
        return None
    data.setdefault("id", game_id)
    return GameMetadata.from_dict(data)


def load_all_metadata(games_dir: Path) -> List[GameMetadata]:
    games = []
    for game_id in listed_game_ids(games_dir):
        meta = load_metadata(games_dir, game_id)
        if meta is not None:
            games.append(meta)
    return games


def write_catalog(games_dir: Path, out_dir: Optional[Path] = None) -> tuple:
    """
    Write games-list.json and games-metadata.json into out_dir
    (default: the parent of games_dir). Returns both output paths.
    """
    games_dir = Path(games_dir)
    out_dir = Path(out_dir) if out_dir is not None else games_dir.parent
    out_dir.mkdir(parents=True, exist_ok=True)

    game_ids = listed_game_ids(games_dir)
    metadata = [m.to_dict() for m in load_all_metadata(games_dir)]

    list_path = out_dir / config.GAMES_LIST_NAME
    meta_path = out_dir / config.GAMES_METADATA_NAME
    with open(list_path, "w", encoding="utf-8") as f:
        json.dump(game_ids, f, indent=2)
    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2, ensure_ascii=False)
    return list_path, meta_path


def main(argv=None):
    ap = argparse.ArgumentParser(description="Generate games-list.json and games-metadata.json.")
    ap.add_argument("--games-dir", type=Path, default=config.DEFAULT_GAMES_DIR,
                    help="Directory holding one folder per game (default: %(default)s)")
    ap.add_argument("-o", "--outdir", type=Path, default=None,
                    help="Where to write the JSON files (default: parent of --games-dir)")
    args = ap.parse_args(argv)

    if not args.games_dir.is_dir():
        print(f"Games directory not found: {args.games_dir}", file=sys.stderr)
        return 1

    list_path, meta_path = write_catalog(args.games_dir, args.outdir)
    with open(list_path, encoding="utf-8") as f:
        count = len(json.load(f))
    print(f"Generated games list with {count} games")
    print(f"   Saved to: {list_path}")
    print(f"   Metadata: {meta_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
