"""
Defaults for the localizer, the catalog generator and the games server.

Every value here can be overridden from the command line.
"""

import os
from pathlib import Path


# -----------------------------
# Filesystem layout
# -----------------------------

# games/html/<gameId>/index.html
DEFAULT_GAMES_DIR = Path(os.environ.get("GAMES_DIR", os.path.join("games", "html")))

INDEX_NAME = "index.html"
BACKUP_NAME = "index.html.backup"
METADATA_NAME = "metadata.json"
GAMES_LIST_NAME = "games-list.json"
GAMES_METADATA_NAME = "games-metadata.json"

# Subdirectories by resource role
JS_DIR = "js"
CSS_DIR = "css"
IMAGES_DIR = "images"
ASSETS_DIR = "assets"


# -----------------------------
# HTTP
# -----------------------------

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate",
}

REQUEST_TIMEOUT = 30
MAX_REDIRECTS = 10


# -----------------------------
# Pacing / caching
# -----------------------------

# Pause between consecutive games in a batch
GAME_DELAY = 0.5

# /api/games/metadata cache lifetime
METADATA_CACHE_TTL = 60
