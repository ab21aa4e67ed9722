import pytest

from pagedata.assets import AssetStore
from pagedata.errors import AssetNotFound


def test_read(dist):
    store = AssetStore(dist)
    assert store.read("app.js") == b"console.log('app');\n"
    assert store.read("/about/index.html").startswith(b"<!doctype html>")


@pytest.mark.parametrize("path", ["nope.js", "about", "../secret.txt", "about/../../secret.txt"])
def test_read_missing_or_outside(dist, path):
    (dist.parent / "secret.txt").write_text("s")
    store = AssetStore(dist)
    with pytest.raises(AssetNotFound) as exc:
        store.read(path)
    assert isinstance(exc.value, FileNotFoundError)
    assert str(exc.value) == f"open {path}: file does not exist"


def test_exists(dist):
    store = AssetStore(dist)
    assert store.exists("style.css")
    assert not store.exists("about")
    assert not store.exists("../dist/style.css/..")


def test_is_dir(dist):
    store = AssetStore(dist)
    assert store.is_dir("about")
    assert not store.is_dir("app.js")
    assert not store.is_dir("..")


# ── Static fallback over HTTP ──────────────────────────────────────


def test_static_asset(get):
    status, headers, body = get("/app.js")
    assert status.startswith("200")
    assert "javascript" in headers["Content-Type"]
    assert body == b"console.log('app');\n"


def test_static_css_content_type(get):
    status, headers, _ = get("/style.css")
    assert status.startswith("200")
    assert headers["Content-Type"].startswith("text/css")


def test_static_missing_is_404(get):
    status, headers, body = get("/missing.png")
    assert status.startswith("404")
    assert headers["Content-Type"] == "text/plain; charset=utf-8"
    assert headers["X-Content-Type-Options"] == "nosniff"
    assert body == b"open missing.png: file does not exist\n"


def test_static_traversal_refused(get):
    status, _, _ = get("/../conftest.py")
    assert not status.startswith("200")


def test_static_index_html_redirects_to_directory(get):
    status, headers, _ = get("/index.html")
    assert status.startswith("301")
    assert headers["Location"].endswith("/")

    status, headers, _ = get("/health/index.html")
    assert status.startswith("301")
    assert headers["Location"].endswith("/health/")


def test_index_html_under_page_route_is_the_page(get):
    status, _, body = get("/about/index.html")
    assert status.startswith("200")
    assert b'"id":"index.html"' in body


def test_static_directory_serves_its_index(get):
    status, headers, body = get("/health/")
    assert status.startswith("200")
    assert headers["Content-Type"].startswith("text/html")
    assert body == b"shadowed\n"


def test_static_directory_without_slash_redirects(get):
    status, headers, _ = get("/nested")
    assert status.startswith("301")
    assert headers["Location"].endswith("/nested/")


def test_static_directory_without_index_is_404(get):
    status, _, body = get("/nested/")
    assert status.startswith("404")
    assert body == b"open nested/index.html: file does not exist\n"


def test_ws_is_static_fallback_outside_dev(get):
    status, _, _ = get("/ws")
    assert status.startswith("404")


def test_specific_routes_win_over_fallback(app):
    rules = [r.rule for r in app.routes]
    assert rules[-1] == "/<filepath:path>"
    assert rules.index("/about/<id:path>") < rules.index("/<filepath:path>")
