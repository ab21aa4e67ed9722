"""Read-only asset store over the bundled ``dist/`` tree."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from pagedata.errors import AssetNotFound


class AssetStore:
    """Map logical, slash-separated paths to file bytes under *root*.

    Paths are resolved relative to the root and may not escape it; anything
    outside the tree, missing, or not a regular file is :class:`AssetNotFound`.
    Nothing is cached: every :meth:`read` hits the filesystem.
    """

    __slots__ = ("root",)

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def resolve(self, logical_path: str) -> Path:
        parts = PurePosixPath(logical_path.lstrip("/")).parts
        if any(p == ".." for p in parts):
            raise AssetNotFound(logical_path)
        candidate = self.root.joinpath(*parts).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            raise AssetNotFound(logical_path)
        return candidate

    def exists(self, logical_path: str) -> bool:
        try:
            return self.resolve(logical_path).is_file()
        except AssetNotFound:
            return False

    def is_dir(self, logical_path: str) -> bool:
        try:
            return self.resolve(logical_path).is_dir()
        except AssetNotFound:
            return False

    def read(self, logical_path: str) -> bytes:
        path = self.resolve(logical_path)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise AssetNotFound(logical_path) from None

    def __repr__(self) -> str:
        return f"AssetStore({str(self.root)!r})"
