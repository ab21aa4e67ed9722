"""Startup configuration.

Build constants ship as package data next to this module; everything
else comes from the environment once, at startup, and is frozen into an
:class:`AppContext` that handlers close over.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_PORT = 8000
DEFAULT_HOST = "0.0.0.0"
IP_LOOKUP_URL = "https://api.myip.com"


def _package_dir() -> Path:
    return Path(__file__).resolve().parent


def _dist_dir() -> Path:
    """Return the bundled asset tree shipped inside the package."""
    return _package_dir() / "dist"


def read_build_constant(path: Path) -> str:
    """Read a build-time constant file, trimmed of surrounding whitespace."""
    return path.read_text(encoding="utf-8").strip()


BUILD_VERSION = read_build_constant(_package_dir() / "VERSION.txt")
BUILD_TAG = read_build_constant(_package_dir() / "TAG.txt")


@dataclass(frozen=True)
class AppContext:
    version: str = BUILD_VERSION
    tag: str = BUILD_TAG
    dev: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    dist_dir: Path = field(default_factory=_dist_dir)
    ip_lookup_url: str = IP_LOOKUP_URL
    # None means no timeout at all, matching the upstream behaviour.
    ip_lookup_timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppContext:
        """Build a context from ``DEV``, ``PORT`` and ``HOST``.

        ``DEV`` enables development mode when set to any non-empty value.
        An empty or missing ``PORT`` falls back to 8000.
        """
        env = os.environ if environ is None else environ
        port = env.get("PORT", "").strip()
        try:
            port_num = int(port) if port else DEFAULT_PORT
        except ValueError:
            raise ValueError(f"invalid PORT {port!r}") from None
        return cls(
            dev=env.get("DEV", "") != "",
            host=env.get("HOST", "").strip() or DEFAULT_HOST,
            port=port_num,
        )
