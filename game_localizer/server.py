#!/usr/bin/env python3
"""
Minimal games server.

    GET /api/games              -> ["game-id", ...]
    GET /api/games/metadata     -> [{id, name, author, ...}, ...]  (cached)
    GET /games/html/<path>      -> files from the games directory
"""

import argparse
import threading
import time
from pathlib import Path

from flask import Flask, jsonify, send_from_directory

from . import config
from .catalog import listed_game_ids, load_all_metadata
from .logging_config import get_logger

logger = get_logger(__name__)


class MetadataCache:
    """Metadata list kept in memory and reloaded once it is older than ttl seconds."""

    def __init__(self, games_dir: Path, ttl: float = config.METADATA_CACHE_TTL, clock=time.monotonic):
        self.games_dir = Path(games_dir)
        self.ttl = ttl
        self.clock = clock
        self._lock = threading.Lock()
        self._data = None
        self._loaded_at = 0.0

    def get(self) -> list:
        with self._lock:
            now = self.clock()
            if self._data is None or now - self._loaded_at >= self.ttl:
                self._data = [m.to_dict() for m in load_all_metadata(self.games_dir)]
                self._loaded_at = now
            return self._data


def create_app(games_dir: Path = config.DEFAULT_GAMES_DIR,
               cache_ttl: float = config.METADATA_CACHE_TTL) -> Flask:
    games_dir = Path(games_dir).resolve()
    app = Flask(__name__)
    app.config["GAMES_DIR"] = games_dir
    cache = MetadataCache(games_dir, cache_ttl)

    @app.route("/api/games")
    def route_api_games():
        try:
            return jsonify(listed_game_ids(games_dir))
        except OSError as e:
            logger.error(f"Error reading games directory: {e}")
            return jsonify([])

    @app.route("/api/games/metadata")
    def route_api_games_metadata():
        try:
            return jsonify(cache.get())
        except OSError as e:
            logger.error(f"Error reading games metadata: {e}")
            return jsonify([])

    @app.route("/games/html/<path:filename>")
    def route_game_file(filename):
        return send_from_directory(games_dir, filename)

    return app


def main(argv=None):
    ap = argparse.ArgumentParser(description="Serve the games directory and its JSON API.")
    ap.add_argument("--games-dir", type=Path, default=config.DEFAULT_GAMES_DIR,
                    help="Directory holding one folder per game (default: %(default)s)")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=5000)
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args(argv)

    app = create_app(args.games_dir)
    logger.info(f"Serving games from {app.config['GAMES_DIR']}")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
