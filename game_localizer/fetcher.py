"""
HTTP fetching with browser-like headers and bounded redirect following.
"""

from typing import NamedTuple, Optional
from urllib.parse import urljoin

import requests

from . import config
from .errors import FetchError
from .logging_config import get_logger

logger = get_logger(__name__)

REDIRECT_CODES = (301, 302, 303, 307, 308)


class FetchResult(NamedTuple):
    content: bytes
    content_type: str
    url: str

    def text(self) -> str:
        return self.content.decode("utf-8", errors="ignore")


class Fetcher:
    """
    Retrieve remote resources one at a time.

    Redirects are followed by hand so the hop count stays bounded; anything
    other than a final 200 raises FetchError.
    """

    def __init__(self, session: requests.Session = None, timeout: float = config.REQUEST_TIMEOUT,
                 max_redirects: int = config.MAX_REDIRECTS):
        if session is None:
            session = requests.Session()
            session.headers.update(config.HEADERS)
        self.session = session
        self.timeout = timeout
        self.max_redirects = max_redirects

    def fetch(self, url: str, headers: Optional[dict] = None) -> FetchResult:
        current = url
        for _ in range(self.max_redirects + 1):
            try:
                r = self.session.get(current, headers=headers, timeout=self.timeout,
                                     allow_redirects=False)
            except requests.RequestException as e:
                raise FetchError(current, message=f"Request failed for {current}: {e}") from e

            if r.status_code in REDIRECT_CODES:
                location = r.headers.get("Location")
                if not location:
                    raise FetchError(current, r.status_code,
                                     f"HTTP {r.status_code} without Location for {current}")
                nxt = urljoin(current, location)
                logger.debug(f"Redirect {r.status_code}: {current} -> {nxt}")
                current = nxt
                continue

            if r.status_code != 200:
                raise FetchError(current, r.status_code)

            return FetchResult(r.content, r.headers.get("Content-Type", ""), current)

        raise FetchError(url, message=f"Too many redirects (>{self.max_redirects}) for {url}")

    def close(self):
        self.session.close()
