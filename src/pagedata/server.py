#!/usr/bin/env python3
"""pagedata server — bundled pages with injected per-route data.

Builds the bottle app for a given :class:`~pagedata.config.AppContext` and
runs it under gevent so the dev reload channel can hold WebSockets open on
the same port as everything else.
"""

from __future__ import annotations

import json
import logging
from typing import Any, cast

import bottle  # type: ignore

from pagedata.config import AppContext

Bottle = cast(Any, bottle.Bottle)
request = cast(Any, bottle.request)
response = cast(Any, bottle.response)
static_file = cast(Any, bottle.static_file)
redirect = cast(Any, bottle.redirect)
HTTPResponse = cast(Any, bottle.HTTPResponse)

_log = logging.getLogger("pagedata")


# ── Response helpers ───────────────────────────────────────────────


def _json_ok(data: Any) -> bytes:
    """Return a JSON 200 body, newline-terminated."""
    body = (json.dumps(data, separators=(",", ":")) + "\n").encode("utf-8")
    response.content_type = "application/json"
    response.set_header("Content-Length", str(len(body)))
    return body


def _html_ok(body: bytes) -> bytes:
    response.content_type = "text/html; charset=utf-8"
    response.set_header("Content-Length", str(len(body)))
    return body


def _text_err(status: int, message: str) -> Any:
    """Return a plain-text error response carrying *message* verbatim."""
    resp = HTTPResponse(status=status, body=message + "\n")
    resp.content_type = "text/plain; charset=utf-8"
    resp.set_header("X-Content-Type-Options", "nosniff")
    return resp


# ── App factory ────────────────────────────────────────────────────


def create_app(ctx: AppContext) -> Any:
    """Build the bottle app for *ctx*.

    Wildcard-free routes always win in bottle; among wildcard routes the
    first registered wins, so the static fallback installed by
    :func:`pagedata.ui.install` must come last.
    """
    from pagedata import api, reload, ui  # noqa: PLC0415

    app = Bottle()
    api.install(app, ctx)
    if ctx.dev:
        reload.install(app, ctx)
    ui.install(app, ctx)
    return app


def describe_routes(app: Any) -> list[tuple[str, str, str]]:
    """Return ``(method, rule, handler)`` for every route, in dispatch order."""
    return [(r.method, r.rule, r.callback.__name__) for r in app.routes]


def serve(app: Any, host: str, port: int) -> None:
    """Serve *app* until the process is killed.

    The caller is expected to have monkey-patched the stdlib already.
    """
    from gevent import pywsgi  # noqa: PLC0415
    from geventwebsocket.handler import WebSocketHandler  # type: ignore # noqa: PLC0415

    server = pywsgi.WSGIServer((host, port), app, handler_class=WebSocketHandler, log=None)
    server.serve_forever()
