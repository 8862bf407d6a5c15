"""
Pytest fixtures for game localizer tests

No test touches the network: FakeSession serves canned responses by URL.
"""

import json

import pytest
from requests.structures import CaseInsensitiveDict

from game_localizer.fetcher import Fetcher


class FakeResponse:
    def __init__(self, status_code=200, content=b"", headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = CaseInsensitiveDict(headers or {})


class FakeSession:
    """
    Stand-in for requests.Session.

    routes maps URL -> FakeResponse, or -> an exception instance to raise.
    Unknown URLs answer 404. Every requested URL is appended to `calls`.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def add(self, url, content=b"", content_type="", status=200, headers=None):
        if isinstance(content, str):
            content = content.encode("utf-8")
        h = dict(headers or {})
        if content_type:
            h["Content-Type"] = content_type
        self.routes[url] = FakeResponse(status, content, h)

    def redirect(self, url, location, status=302):
        self.routes[url] = FakeResponse(status, b"", {"Location": location})

    def get(self, url, headers=None, timeout=None, allow_redirects=True):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(404)
        if isinstance(route, Exception):
            raise route
        return route

    def close(self):
        self.closed = True


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def fetcher(session):
    return Fetcher(session=session)


@pytest.fixture
def games_dir(tmp_path):
    path = tmp_path / "games" / "html"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_game(games_dir):
    """Create games_dir/<game_id>/ with the given index.html (and metadata)."""
    def _make(game_id, index_html=None, metadata=None):
        game_dir = games_dir / game_id
        game_dir.mkdir(parents=True, exist_ok=True)
        if index_html is not None:
            (game_dir / "index.html").write_text(index_html, encoding="utf-8")
        if metadata is not None:
            (game_dir / "metadata.json").write_text(json.dumps(metadata), encoding="utf-8")
        return game_dir
    return _make


@pytest.fixture
def iframe_wrapper():
    """HTML of a wrapper page whose only content is an iframe to src."""
    def _wrapper(src):
        return (
            "<!DOCTYPE html>\n<html><head><title>Game</title></head>\n"
            f'<body><iframe src="{src}" width="100%" height="100%"></iframe></body></html>\n'
        )
    return _wrapper
