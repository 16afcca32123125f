"""Manifest store interface.

The store is the only component that touches the filesystem.  Paths are
root-relative and use the ``/apps/web`` form produced by the workspace index;
the empty string is the repository root.  Manifests live at
``{root}{path}/package.json``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from spaceman.models.manifest import Manifest


@runtime_checkable
class ManifestStore(Protocol):
    """Protocol for reading and writing manifests and workspace folders."""

    def read(self, path: str = "") -> dict | None:
        """Read the raw manifest at *path*.  Returns ``None`` if missing or not JSON."""
        ...

    def load(self, path: str = "") -> Manifest | None:
        """Read and validate the manifest at *path*.  Returns ``None`` on failure."""
        ...

    def write(self, path: str, data: dict) -> None:
        """Write the manifest at *path* as two-space-indented JSON."""
        ...

    def scripts(self, path: str = "") -> list[str]:
        """Script names declared by the manifest at *path*."""
        ...

    def dependencies(self, source: str | Manifest) -> list[str]:
        """``dependencies`` then ``devDependencies`` names of a path or manifest."""
        ...

    def exists(self, path: str) -> bool: ...

    def list_dirs(self, path: str) -> list[str]:
        """Immediate subdirectory names of *path*.  Empty if *path* is missing."""
        ...

    def make_dir(self, path: str) -> None: ...

    def write_text(self, path: str, text: str) -> None: ...

    def remove(self, path: str) -> None:
        """Delete a file or directory tree.  No-op if not found."""
        ...
