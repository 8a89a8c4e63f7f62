"""Read-only access to template assets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path

from ..core.errors import AssetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetEntry:
    """An immediate child of an asset directory."""

    name: str
    path: str
    is_dir: bool


class TemplateStore:
    """Addressable collection of template assets organized under named roots.

    Paths are POSIX-style strings relative to the store base, for example
    ``"aws/src/{{.ProjectName}}.Api/Program.cs"``.
    """

    def __init__(self, base: Traversable) -> None:
        self._base = base

    @classmethod
    def bundled(cls) -> TemplateStore:
        """Return the asset repository shipped inside the package."""
        return cls(files("ndc") / "templates")

    @classmethod
    def from_directory(cls, directory: Path) -> TemplateStore:
        """Return a store backed by a directory on disk."""
        if not directory.is_dir():
            raise AssetError(f"Template directory not found: {directory}", path=directory)
        return cls(directory)

    def _resolve(self, path: str) -> Traversable:
        node = self._base
        for part in path.split("/"):
            if part:
                node = node / part
        return node

    def has_root(self, root: str) -> bool:
        return self._resolve(root).is_dir()

    def list_children(self, path: str) -> list[AssetEntry]:
        """List the immediate children of an asset directory, sorted by name.

        Raises:
            AssetError: If the directory does not exist or cannot be listed
        """
        node = self._resolve(path)
        try:
            children = sorted(node.iterdir(), key=lambda child: child.name)
        except OSError as exc:
            raise AssetError(
                f"failed to read template directory {path}: {exc}", path=path
            ) from exc
        return [
            AssetEntry(
                name=child.name,
                path=f"{path.rstrip('/')}/{child.name}",
                is_dir=child.is_dir(),
            )
            for child in children
        ]

    def read_bytes(self, path: str) -> bytes:
        """Read the full content of an asset file.

        Raises:
            AssetError: If the file does not exist or cannot be read
        """
        try:
            return self._resolve(path).read_bytes()
        except OSError as exc:
            raise AssetError(
                f"failed to read template file {path}: {exc}", path=path
            ) from exc
