"""Health and IP lookup routes."""

from __future__ import annotations

import logging
from typing import Any

import requests

from pagedata.config import AppContext
from pagedata.errors import UpstreamError
from pagedata.server import _json_ok, _text_err, response

_log = logging.getLogger("pagedata")


def lookup_ip(url: str, timeout: float | None = None) -> str:
    """Ask the upstream service for this host's public IP.

    The upstream answers with a JSON object carrying an ``ip`` field. A
    missing field yields an empty string; a body that is not a JSON object,
    a non-string ``ip``, or any transport failure is an :class:`UpstreamError`.
    """
    try:
        with requests.get(url, timeout=timeout) as resp:
            payload = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise UpstreamError(str(e)) from e
    if not isinstance(payload, dict):
        raise UpstreamError(f"unexpected response from {url}: {type(payload).__name__}")
    ip = payload.get("ip", "")
    if not isinstance(ip, str):
        raise UpstreamError(f"unexpected ip value from {url}: {ip!r}")
    return ip


def install(app: Any, ctx: AppContext) -> None:
    @app.get("/health")
    def handle_health() -> bytes:
        return _json_ok({"version": ctx.version, "tag": ctx.tag})

    @app.get("/ip")
    def handle_ip() -> Any:
        try:
            ip = lookup_ip(ctx.ip_lookup_url, ctx.ip_lookup_timeout)
        except UpstreamError as e:
            _log.warning("ip lookup failed: %s", e)
            return _text_err(e.status, str(e))
        response.content_type = "text/plain; charset=utf-8"
        return ip
