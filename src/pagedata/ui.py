"""Page routes and static asset fallback."""

from __future__ import annotations

import logging
from typing import Any

from pagedata.assets import AssetStore
from pagedata.config import AppContext
from pagedata.errors import AssetNotFound, SerializationError
from pagedata.pages import PAGES, Route, render_page
from pagedata.providers import PageRequest
from pagedata.server import _html_ok, _text_err, redirect, request, static_file

_log = logging.getLogger("pagedata")


def _page_request() -> PageRequest:
    return PageRequest(
        params=dict(request.url_args),
        query=dict(request.query),
        headers=dict(request.headers),
    )


def _page_handler(store: AssetStore, route: Route, dev: bool) -> Any:
    def handle_page(**url_args: str) -> Any:
        _log.info("page %s", request.path)
        try:
            body = render_page(store, route, _page_request(), dev=dev)
        except (AssetNotFound, SerializationError) as e:
            return _text_err(e.status, str(e))
        return _html_ok(body)

    handle_page.__name__ = f"page{route.path.rstrip('/').replace('/', '_') or '_index'}"
    return handle_page


def _redirect_to(location: str) -> Any:
    def redirect_slash() -> Any:
        redirect(location, 301)

    return redirect_slash


def install(app: Any, ctx: AppContext) -> None:
    store = AssetStore(ctx.dist_dir)

    for route in PAGES:
        _log.info("register %s", route.path)
        handler = _page_handler(store, route, ctx.dev)
        app.get(route.pattern, callback=handler)
        if "<" in route.pattern:
            # A trailing capture may be empty: /about/ is the same page, id "".
            prefix = route.pattern.split("<", 1)[0]
            app.get(prefix, callback=handler)
            app.get(prefix.rstrip("/"), callback=_redirect_to(prefix))

    # ── Static fallback (must stay last) ───────────────────────────

    @app.get("/<filepath:path>")
    def serve_static_asset(filepath: str) -> Any:
        _log.info("static /%s", filepath)
        if filepath == "index.html" or filepath.endswith("/index.html"):
            redirect("./", 301)
        if filepath.endswith("/"):
            filepath += "index.html"
        elif store.is_dir(filepath):
            redirect(f"/{filepath}/", 301)
        if not store.exists(filepath):
            return _text_err(404, str(AssetNotFound(filepath)))
        return static_file(filepath, root=str(store.root))
