"""
Tests for game_localizer.localize
"""

import pytest
from bs4 import BeautifulSoup

from game_localizer import localize
from game_localizer.fetcher import Fetcher
from game_localizer.localize import (FAILED, LOCALIZED, RESTORED, SKIPPED, LocalizeResult,
                                     find_iframe_src, is_localized, list_game_ids, localize_game,
                                     restore_game, run_batch, scan_iframe_games, skip_localized,
                                     summarize)

GAME_URL = "https://host.test/games/slope/index.html"
GAME_PAGE = """<!DOCTYPE html>
<html><head>
<link rel="stylesheet" href="style.css">
<script src="game.js"></script>
</head><body><img src="logo.png"><canvas id="c"></canvas></body></html>
"""


@pytest.fixture
def remote_game(session):
    session.add(GAME_URL, GAME_PAGE, "text/html; charset=utf-8")
    session.add("https://host.test/games/slope/style.css", "body{background:url(bg.png)}", "text/css")
    session.add("https://host.test/games/slope/bg.png", b"BG", "image/png")
    session.add("https://host.test/games/slope/game.js", "start();", "application/javascript")
    session.add("https://host.test/games/slope/logo.png", b"LOGO", "image/png")
    return session


def test_find_iframe_src():
    assert find_iframe_src('<iframe src="https://a.test/x"></iframe>') == "https://a.test/x"
    assert find_iframe_src("<iframe></iframe><p>hi</p>") is None
    assert find_iframe_src('<script src="a.js"></script>') is None


def test_non_iframe_game_is_skipped_and_untouched(make_game, games_dir, fetcher, session):
    html = "<html><body><canvas></canvas><script src='game.js'></script></body></html>"
    game_dir = make_game("native", html)

    result = localize_game("native", games_dir, fetcher)

    assert result.status == SKIPPED
    assert result.reason == "not-iframe"
    assert (game_dir / "index.html").read_text() == html
    assert not (game_dir / "index.html.backup").exists()
    assert session.calls == []


def test_localize_success(make_game, games_dir, fetcher, remote_game, iframe_wrapper):
    wrapper = iframe_wrapper(GAME_URL)
    game_dir = make_game("slope", wrapper)

    result = localize_game("slope", games_dir, fetcher)

    assert result == LocalizeResult("slope", LOCALIZED, files_downloaded=4)
    assert (game_dir / "index.html.backup").read_text() == wrapper
    soup = BeautifulSoup((game_dir / "index.html").read_text(), "html.parser")
    assert soup.find("script")["src"] == "js/game.js"
    assert soup.find("link")["href"] == "css/style.css"
    assert soup.find("img")["src"] == "images/logo.png"
    assert (game_dir / "js" / "game.js").read_text() == "start();"
    assert (game_dir / "assets" / "bg.png").read_bytes() == b"BG"
    assert "url('../assets/bg.png')" in (game_dir / "css" / "style.css").read_text()


def test_backup_is_written_once(make_game, games_dir, fetcher, remote_game, iframe_wrapper):
    original = iframe_wrapper(GAME_URL)
    game_dir = make_game("slope", original)
    localize_game("slope", games_dir, fetcher)

    # a porting script rewrites the wrapper, then the game is localized again
    for n in range(3):
        (game_dir / "index.html").write_text(iframe_wrapper(GAME_URL) + f"<!-- {n} -->")
        assert localize_game("slope", games_dir, fetcher).status == LOCALIZED

    assert (game_dir / "index.html.backup").read_text() == original


def test_restore_is_byte_for_byte(make_game, games_dir, fetcher, remote_game, iframe_wrapper):
    original = iframe_wrapper(GAME_URL).replace("\n", "\r\n").encode("utf-8") + b"\xef\xbb\xbf"
    game_dir = make_game("slope")
    (game_dir / "index.html").write_bytes(original)

    assert localize_game("slope", games_dir, fetcher).status == LOCALIZED
    assert (game_dir / "index.html").read_bytes() != original

    result = restore_game("slope", games_dir)
    assert result.status == RESTORED
    assert result.success
    assert (game_dir / "index.html").read_bytes() == original


def test_restore_without_backup(make_game, games_dir):
    make_game("plain", "<html></html>")
    result = restore_game("plain", games_dir)
    assert result.status == SKIPPED
    assert result.reason == "no-backup"


def test_page_fetch_failure_leaves_game_untouched(make_game, games_dir, fetcher, iframe_wrapper):
    wrapper = iframe_wrapper("https://gone.test/game/")
    game_dir = make_game("gone", wrapper)

    result = localize_game("gone", games_dir, fetcher)

    assert result.status == FAILED
    assert "404" in result.reason
    assert (game_dir / "index.html").read_text() == wrapper
    assert not (game_dir / "index.html.backup").exists()


def test_missing_index_fails(make_game, games_dir, fetcher):
    make_game("empty")
    result = localize_game("empty", games_dir, fetcher)
    assert result.status == FAILED
    assert "index.html not found" in result.reason


def test_broken_assets_still_localize(make_game, games_dir, fetcher, session, iframe_wrapper):
    session.add(GAME_URL, '<script src="missing.js"></script><img src="ok.png">', "text/html")
    session.add("https://host.test/games/slope/ok.png", b"OK", "image/png")
    game_dir = make_game("slope", iframe_wrapper(GAME_URL))

    result = localize_game("slope", games_dir, fetcher)

    assert result.status == LOCALIZED
    assert result.files_downloaded == 1
    soup = BeautifulSoup((game_dir / "index.html").read_text(), "html.parser")
    assert soup.find("script")["src"] == "https://host.test/games/slope/missing.js"
    assert soup.find("img")["src"] == "images/ok.png"


def test_each_game_gets_a_fresh_cache(make_game, games_dir, fetcher, remote_game, iframe_wrapper):
    make_game("one", iframe_wrapper(GAME_URL))
    make_game("two", iframe_wrapper(GAME_URL))

    localize_game("one", games_dir, fetcher)
    localize_game("two", games_dir, fetcher)

    assert remote_game.calls.count("https://host.test/games/slope/game.js") == 2
    assert (games_dir / "two" / "js" / "game.js").exists()


def test_list_and_scan(make_game, games_dir, iframe_wrapper):
    make_game("b-iframe", iframe_wrapper(GAME_URL))
    make_game("a-native", "<canvas></canvas>")
    make_game("c-no-index")
    (games_dir / "stray.txt").write_text("x")

    assert list_game_ids(games_dir) == ["a-native", "b-iframe", "c-no-index"]
    assert scan_iframe_games(games_dir) == ["b-iframe"]


def test_list_missing_dir(tmp_path):
    assert list_game_ids(tmp_path / "nope") == []


def test_run_batch_paces_and_continues():
    slept = []
    outcomes = {
        "a": LocalizeResult("a", LOCALIZED, 3),
        "b": LocalizeResult("b", FAILED, reason="HTTP 500"),
        "c": LocalizeResult("c", SKIPPED, reason="not-iframe"),
    }

    results = run_batch(["a", "b", "c"], outcomes.get, delay=0.5, sleep=slept.append)

    assert [r.game_id for r in results] == ["a", "b", "c"]
    assert slept == [0.5, 0.5]
    assert summarize(results) == {"success": 1, "failed": 1, "skipped": 1}


def test_skip_localized(make_game, games_dir, fetcher, remote_game, iframe_wrapper):
    make_game("done", iframe_wrapper(GAME_URL))
    make_game("fresh", iframe_wrapper(GAME_URL))
    localize_game("done", games_dir, fetcher)

    todo, skipped = skip_localized(["done", "fresh"], games_dir)

    assert is_localized("done", games_dir)
    assert todo == ["fresh"]
    assert skipped == [LocalizeResult("done", SKIPPED, reason="already-localized")]


def test_own_fetcher_is_closed(make_game, games_dir, session, monkeypatch, iframe_wrapper):
    monkeypatch.setattr(localize, "Fetcher", lambda: Fetcher(session=session))
    make_game("gone", iframe_wrapper("https://gone.test/"))

    assert localize_game("gone", games_dir).status == FAILED
    assert session.closed
