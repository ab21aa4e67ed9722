"""Page rendering: per-route JSON data spliced into a bundled HTML document.

The document for a route is read from the asset store on every request, the
route's provider output is serialized, and a ``<script>`` assigning it to
``window.__DATA__`` is placed right after the first ``<head>``. In dev mode
the live-reload client is appended after the whole document.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pagedata.assets import AssetStore
from pagedata.errors import SerializationError
from pagedata.providers import DataProvider, PageRequest, about_data, index_data
from pagedata.reload import RELOAD_SCRIPT

HEAD_TAG = b"<head>"
DATA_GLOBAL = "window.__DATA__"

# Characters that must not appear raw inside an inline <script>.
_SCRIPT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_SCRIPT_ESCAPE_TABLE = str.maketrans(_SCRIPT_ESCAPES)


@dataclass(frozen=True)
class Route:
    pattern: str
    directory: str
    provider: DataProvider

    @property
    def path(self) -> str:
        return "/" + self.directory

    @property
    def document(self) -> str:
        """Logical path of the route's HTML document in the asset store."""
        return f"{self.directory}/index.html" if self.directory else "index.html"


PAGES: tuple[Route, ...] = (
    Route("/", "", index_data),
    Route("/about/<id:path>", "about", about_data),
)


def serialize_data(value: Any, route_path: str = "/") -> bytes:
    """Encode *value* as compact JSON safe to embed in an inline script.

    Raises :class:`SerializationError` for values JSON cannot represent,
    including NaN and infinities.
    """
    try:
        text = json.dumps(
            value, ensure_ascii=False, allow_nan=False, separators=(",", ":")
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(route_path, e) from e
    return text.translate(_SCRIPT_ESCAPE_TABLE).encode("utf-8")


def injection_fragment(payload: bytes) -> bytes:
    return (
        HEAD_TAG
        + b"\n"
        + b" " * 6
        + b"<script>"
        + DATA_GLOBAL.encode("ascii")
        + b" = "
        + payload
        + b";</script>"
    )


def inject_data(document: bytes, payload: bytes) -> bytes:
    """Replace the first ``<head>`` in *document* with the data fragment.

    Later occurrences are left as they are; a document without the marker
    comes back unchanged.
    """
    return document.replace(HEAD_TAG, injection_fragment(payload), 1)


def render_page(
    store: AssetStore, route: Route, req: PageRequest, *, dev: bool = False
) -> bytes:
    document = store.read(route.document)
    payload = serialize_data(route.provider(req), route.path)
    body = inject_data(document, payload)
    if dev:
        body += RELOAD_SCRIPT
    return body
