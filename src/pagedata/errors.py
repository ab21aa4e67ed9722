"""Error taxonomy for pagedata handlers.

Every error is terminal for the request that raised it; nothing here is
retried and nothing propagates past the handler that maps it to a status.
"""

from __future__ import annotations


class PageDataError(Exception):
    """Base class for all pagedata errors."""

    status = 500


class AssetNotFound(PageDataError, FileNotFoundError):
    """A logical path has no file in the asset store."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"open {path}: file does not exist")

    def __str__(self) -> str:
        return self.args[0]


class SerializationError(PageDataError):
    """A data provider returned something that cannot be encoded as JSON."""

    def __init__(self, route_path: str, cause: Exception) -> None:
        self.route_path = route_path
        self.cause = cause
        super().__init__(f'error loading page "{route_path}" data: {cause}')


class UpstreamError(PageDataError):
    """The external IP lookup failed (request, decode or response shape)."""


class UpgradeFailure(PageDataError):
    """The reload channel handshake did not produce a WebSocket."""

    status = 404
