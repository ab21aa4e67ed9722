from __future__ import annotations

from io import BytesIO
from pathlib import Path
from wsgiref.util import setup_testing_defaults

import pytest

from pagedata.config import AppContext
from pagedata.server import create_app

INDEX_HTML = b"""<!doctype html>
<html>
  <head>
    <title>home</title>
  </head>
  <body><h1 id="prompt"></h1></body>
</html>
"""

ABOUT_HTML = b"""<!doctype html>
<html>
  <head>
    <title>about</title>
  </head>
  <body><h1 id="greeting"></h1></body>
</html>
"""


@pytest.fixture
def dist(tmp_path: Path) -> Path:
    root = tmp_path / "dist"
    (root / "about").mkdir(parents=True)
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "about" / "index.html").write_bytes(ABOUT_HTML)
    (root / "app.js").write_text("console.log('app');\n")
    (root / "style.css").write_text("body { margin: 0; }\n")
    (root / "health").mkdir()
    (root / "health" / "index.html").write_text("shadowed\n")
    (root / "nested").mkdir()
    (root / "nested" / "data.txt").write_text("nested\n")
    return root


@pytest.fixture
def ctx(dist: Path) -> AppContext:
    return AppContext(version="1.2.3", tag="abc123", dist_dir=dist)


@pytest.fixture
def dev_ctx(ctx: AppContext) -> AppContext:
    return AppContext(version=ctx.version, tag=ctx.tag, dev=True, dist_dir=ctx.dist_dir)


@pytest.fixture
def app(ctx: AppContext):
    return create_app(ctx)


@pytest.fixture
def dev_app(dev_ctx: AppContext):
    return create_app(dev_ctx)


def wsgi_get(
    app,
    path: str,
    headers: dict[str, str] | None = None,
    extra: dict[str, object] | None = None,
) -> tuple[str, dict[str, str], bytes]:
    environ: dict[str, object] = {}
    setup_testing_defaults(environ)
    url_path, _, query = path.partition("?")
    environ["REQUEST_METHOD"] = "GET"
    environ["PATH_INFO"] = url_path
    environ["QUERY_STRING"] = query
    environ["wsgi.input"] = BytesIO(b"")
    if headers:
        for k, v in headers.items():
            environ[f"HTTP_{k.upper().replace('-', '_')}"] = v
    if extra:
        environ.update(extra)

    status_holder: dict[str, object] = {"status": "", "headers": {}}

    def _start_response(status: str, response_headers, exc_info=None):
        status_holder["status"] = status
        status_holder["headers"] = {k: v for k, v in response_headers}
        return None

    result = app(environ, _start_response)
    try:
        body = b"".join(result)
    finally:
        close = getattr(result, "close", None)
        if close is not None:
            close()
    return str(status_holder["status"]), dict(status_holder["headers"]), body  # type: ignore[arg-type]


@pytest.fixture
def get(app):
    def _get(path: str, headers: dict[str, str] | None = None):
        return wsgi_get(app, path, headers)

    return _get


@pytest.fixture
def dev_get(dev_app):
    def _get(path: str, headers: dict[str, str] | None = None):
        return wsgi_get(dev_app, path, headers)

    return _get


@pytest.fixture
def wsgi():
    return wsgi_get
