"""Per-route data providers.

A provider is a pure function from a :class:`PageRequest` to a
JSON-serializable value. Whatever it returns is exposed to the page as
``window.__DATA__``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PageRequest:
    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


DataProvider = Callable[[PageRequest], Any]


def index_data(req: PageRequest) -> dict[str, Any]:
    return {"prompt": "Como estas?"}


def about_data(req: PageRequest) -> dict[str, Any]:
    # Missing capture (GET /about/) yields an empty id, never null.
    return {"greeting": "halo!", "id": req.params.get("id") or ""}
