"""
Resource discovery and rewriting for a single game page.

Finds the scripts, stylesheets, images and favicon referenced by an HTML
document, downloads each once into the game directory, and points the
references at the local copies. Stylesheets are also scanned for url(...)
assets, which land under assets/.
"""

import re
from pathlib import Path
from typing import Dict, Optional, Set
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from . import config
from .errors import FetchError
from .fetcher import Fetcher
from .logging_config import get_logger
from .paths import dedupe_path, filename_for, relative_to

logger = get_logger(__name__)

CSS_URL_RE = re.compile(
    r'''(?ix)
    url\(\s*(?:"([^"]+)"|'([^']+)'|([^"')]+))\s*\)
    ''')

# (css selector, attribute, subdirectory), in scan order
HTML_REFERENCES = [
    ("script[src]", "src", config.JS_DIR),
    ('link[rel="stylesheet"][href]', "href", config.CSS_DIR),
    ("img[src]", "src", config.IMAGES_DIR),
]
FAVICON_SELECTOR = 'link[rel="icon"][href], link[rel="shortcut icon"][href]'


class DownloadContext:
    """
    Per-game download state.

    `downloaded` maps absolute URL -> local path relative to the game dir;
    a URL is fetched at most once while the context lives.
    """

    def __init__(self, game_dir: Path, fetcher: Fetcher):
        self.game_dir = Path(game_dir)
        self.fetcher = fetcher
        self.downloaded: Dict[str, str] = {}
        self.rewritten_css: Set[str] = set()

    @property
    def files_downloaded(self) -> int:
        return len(self.downloaded)

    def taken_paths(self) -> Set[str]:
        return set(self.downloaded.values())


def is_fetchable(ref: Optional[str]) -> bool:
    return bool(ref) and not ref.strip().startswith("data:")


def download_resource(ctx: DownloadContext, url: str, subdir: str) -> str:
    """
    Download url into game_dir/subdir and return its relative local path.

    Cache hits return the recorded path without touching the network.
    Raises FetchError or OSError on failure.
    """
    if url in ctx.downloaded:
        return ctx.downloaded[url]

    logger.info(f"  Downloading: {url}")
    result = ctx.fetcher.fetch(url)

    rel_path = dedupe_path(f"{subdir}/{filename_for(url, result.content_type)}", ctx.taken_paths())
    save_path = ctx.game_dir / rel_path
    save_path.parent.mkdir(parents=True, exist_ok=True)
    save_path.write_bytes(result.content)

    ctx.downloaded[url] = rel_path
    return rel_path


def try_download(ctx: DownloadContext, url: str, subdir: str) -> Optional[str]:
    """download_resource, logging and returning None on failure."""
    try:
        return download_resource(ctx, url, subdir)
    except (FetchError, OSError) as e:
        logger.warning(f"  Failed to download {url}: {e}")
        return None


def process_css(ctx: DownloadContext, css: str, css_url: str, css_path: str) -> str:
    """
    Download every url(...) asset in css and replace the token with url('<local>').
    Tokens whose download fails point at the absolute source URL instead.

    css_url resolves relative references; css_path (relative to the game dir)
    is where the stylesheet lives, so local references are relative to it.
    """
    def repl(match: re.Match) -> str:
        ref = (match.group(1) or match.group(2) or match.group(3)).strip()
        if not ref or ref.startswith(("data:", "#")):
            return match.group(0)
        absolute_url = urljoin(css_url, ref)
        local = try_download(ctx, absolute_url, config.ASSETS_DIR)
        if local is None:
            return f"url('{absolute_url}')"
        return f"url('{relative_to(local, css_path)}')"

    return CSS_URL_RE.sub(repl, css)


def localize_stylesheet(ctx: DownloadContext, css_url: str, css_path: str):
    """Rewrite a downloaded stylesheet in place; each stylesheet is processed once."""
    if css_path in ctx.rewritten_css:
        return
    ctx.rewritten_css.add(css_path)
    full_path = ctx.game_dir / css_path
    try:
        css = full_path.read_text(encoding="utf-8", errors="ignore")
        full_path.write_text(process_css(ctx, css, css_url, css_path), encoding="utf-8")
    except OSError as e:
        logger.warning(f"  Failed to process CSS {css_path}: {e}")


def _localize_attr(ctx: DownloadContext, tag, attr: str, base_url: str, subdir: str):
    ref = tag.get(attr)
    if not is_fetchable(ref):
        return
    absolute_url = urljoin(base_url, ref.strip())
    local = try_download(ctx, absolute_url, subdir)
    if local is None:
        tag[attr] = absolute_url
        return
    tag[attr] = local
    if subdir == config.CSS_DIR:
        localize_stylesheet(ctx, absolute_url, local)


def process_html(ctx: DownloadContext, html: str, base_url: str) -> str:
    """Localize all script/stylesheet/image/favicon references and return the new HTML."""
    soup = BeautifulSoup(html, "html.parser")

    for selector, attr, subdir in HTML_REFERENCES:
        for tag in soup.select(selector):
            _localize_attr(ctx, tag, attr, base_url, subdir)

    favicon = soup.select_one(FAVICON_SELECTOR)
    if favicon is not None:
        _localize_attr(ctx, favicon, "href", base_url, config.IMAGES_DIR)

    return str(soup)
