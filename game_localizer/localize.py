"""
Per-game localization, restore and batch driving.

A game directory moves from "iframe wrapper" to "localized" when its embedded
page and assets are downloaded and index.html is rewritten; the original
wrapper is kept as index.html.backup (written once, never overwritten) so
restore can always put it back.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from bs4 import BeautifulSoup

from . import config
from .errors import LocalizerError, NoBackupError, NotIframeGameError
from .fetcher import Fetcher
from .logging_config import get_logger
from .resources import DownloadContext, process_html

logger = get_logger(__name__)

LOCALIZED = "localized"
RESTORED = "restored"
SKIPPED = "skipped"
FAILED = "failed"
ALREADY_LOCALIZED = "already-localized"


@dataclass
class LocalizeResult:
    game_id: str
    status: str
    files_downloaded: int = 0
    reason: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status in (LOCALIZED, RESTORED)


def find_iframe_src(html: str) -> Optional[str]:
    """src of the first <iframe> with a non-empty src, or None."""
    soup = BeautifulSoup(html, "html.parser")
    for iframe in soup.find_all("iframe", src=True):
        src = iframe["src"].strip()
        if src:
            return src
    return None


def is_localized(game_id: str, games_dir: Path = config.DEFAULT_GAMES_DIR) -> bool:
    """A game with index.html.backup has already been localized."""
    return (Path(games_dir) / game_id / config.BACKUP_NAME).exists()


def skip_localized(game_ids: Iterable[str], games_dir: Path = config.DEFAULT_GAMES_DIR):
    """
    Split game_ids into (ids still to localize, skipped results for the rest).
    """
    todo, skipped = [], []
    for game_id in game_ids:
        if is_localized(game_id, games_dir):
            logger.info(f"{game_id}: Already localized")
            skipped.append(LocalizeResult(game_id, SKIPPED, reason=ALREADY_LOCALIZED))
        else:
            todo.append(game_id)
    return todo, skipped


def list_game_ids(games_dir: Path) -> List[str]:
    """Sorted names of the game directories under games_dir."""
    games_dir = Path(games_dir)
    if not games_dir.is_dir():
        return []
    return sorted(p.name for p in games_dir.iterdir() if p.is_dir())


def _localize(game_id: str, game_dir: Path, fetcher: Fetcher) -> int:
    index_path = game_dir / config.INDEX_NAME
    if not index_path.is_file():
        raise LocalizerError(f"{config.INDEX_NAME} not found")

    original = index_path.read_bytes()
    iframe_url = find_iframe_src(original.decode("utf-8", errors="ignore"))
    if iframe_url is None:
        raise NotIframeGameError(game_id)

    logger.info(f"Processing {game_id}")
    logger.info(f"  Iframe URL: {iframe_url}")

    ctx = DownloadContext(game_dir, fetcher)
    page = fetcher.fetch(iframe_url)
    localized_html = process_html(ctx, page.text(), page.url)

    backup_path = game_dir / config.BACKUP_NAME
    if not backup_path.exists():
        backup_path.write_bytes(original)

    index_path.write_text(localized_html, encoding="utf-8")
    return ctx.files_downloaded


def localize_game(game_id: str, games_dir: Path = config.DEFAULT_GAMES_DIR,
                  fetcher: Fetcher = None) -> LocalizeResult:
    """
    Localize one game in place.

    Never raises: a missing iframe is reported as skipped, anything else
    (fetch errors, filesystem errors) as failed with the error message.
    """
    owns_fetcher = fetcher is None
    if owns_fetcher:
        fetcher = Fetcher()
    game_dir = Path(games_dir) / game_id
    try:
        count = _localize(game_id, game_dir, fetcher)
    except NotIframeGameError as e:
        logger.info(f"{game_id}: Not an iframe game, skipping")
        return LocalizeResult(game_id, SKIPPED, reason=e.reason)
    except Exception as e:
        logger.error(f"{game_id}: Failed - {e}")
        return LocalizeResult(game_id, FAILED, reason=str(e))
    finally:
        if owns_fetcher:
            fetcher.close()

    logger.info(f"{game_id}: Successfully localized ({count} files)")
    return LocalizeResult(game_id, LOCALIZED, files_downloaded=count)


def restore_game(game_id: str, games_dir: Path = config.DEFAULT_GAMES_DIR) -> LocalizeResult:
    """Overwrite index.html with index.html.backup, byte for byte."""
    game_dir = Path(games_dir) / game_id
    backup_path = game_dir / config.BACKUP_NAME
    try:
        if not backup_path.is_file():
            raise NoBackupError(game_id)
        (game_dir / config.INDEX_NAME).write_bytes(backup_path.read_bytes())
    except NoBackupError as e:
        logger.info(f"{game_id}: No backup found")
        return LocalizeResult(game_id, SKIPPED, reason=e.reason)
    except OSError as e:
        logger.error(f"{game_id}: {e}")
        return LocalizeResult(game_id, FAILED, reason=str(e))

    logger.info(f"{game_id}: Restored from backup")
    return LocalizeResult(game_id, RESTORED)


def scan_iframe_games(games_dir: Path = config.DEFAULT_GAMES_DIR) -> List[str]:
    """Game ids whose index.html is still an iframe wrapper."""
    found = []
    for game_id in list_game_ids(games_dir):
        index_path = Path(games_dir) / game_id / config.INDEX_NAME
        try:
            html = index_path.read_text(encoding="utf-8", errors="ignore")
        except OSError:
            continue
        if find_iframe_src(html) is not None:
            found.append(game_id)
    return found


def run_batch(game_ids: Iterable[str], action: Callable[[str], LocalizeResult],
              delay: float = 0.0, sleep: Callable[[float], None] = time.sleep) -> List[LocalizeResult]:
    """
    Apply action to each game in turn, pausing `delay` seconds between games.

    action is expected to report failures in its result; one game never stops
    the rest of the batch.
    """
    results = []
    for i, game_id in enumerate(game_ids):
        if i and delay > 0:
            sleep(delay)
        results.append(action(game_id))
    return results


def summarize(results: List[LocalizeResult]) -> dict:
    summary = {"success": 0, "failed": 0, "skipped": 0}
    for r in results:
        if r.success:
            summary["success"] += 1
        elif r.status == SKIPPED:
            summary["skipped"] += 1
        else:
            summary["failed"] += 1
    return summary
