"""pagedata — bundled pages with per-route JSON data and a dev live-reload channel."""

from __future__ import annotations

from pagedata.config import BUILD_TAG, BUILD_VERSION

__version__ = BUILD_VERSION
__tag__ = BUILD_TAG
