"""Local filesystem manifest store.

Layout::

    {root}/package.json                  root manifest (path "")
    {root}/{group}/{folder}/package.json workspace manifest (path "/{group}/{folder}")

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path.  Nothing is cached; every read goes to disk.
"""

from __future__ import annotations

import contextlib
import json
import os
import shutil
import tempfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from spaceman.models.manifest import Manifest

MANIFEST_FILE = "package.json"


class LocalManifestStore:
    """Local filesystem implementation of the ManifestStore protocol."""

    def __init__(self, root: str | Path = ".") -> None:
        self.root = Path(root)

    def resolve(self, path: str = "") -> Path:
        """Absolute-ish filesystem path for a root-relative *path*."""
        return self.root / path.strip("/") if path.strip("/") else self.root

    def manifest_path(self, path: str = "") -> Path:
        return self.resolve(path) / MANIFEST_FILE

    # -- Manifests -------------------------------------------------------------

    def read(self, path: str = "") -> dict | None:
        target = self.manifest_path(path)
        try:
            data = json.loads(_read_file(target))
        except (OSError, ValueError):
            return None
        return data if isinstance(data, dict) else None

    def load(self, path: str = "") -> Manifest | None:
        data = self.read(path)
        if data is None:
            return None
        try:
            return Manifest.model_validate(data)
        except ValidationError as exc:
            logger.debug("Ignoring malformed manifest {}: {}", self.manifest_path(path), exc)
            return None

    def write(self, path: str, data: dict) -> None:
        target = self.manifest_path(path)
        logger.debug("Writing {}", target)
        _atomic_write(target, json.dumps(data, indent=2, ensure_ascii=False) + "\n")

    # -- Helpers ---------------------------------------------------------------

    def scripts(self, path: str = "") -> list[str]:
        manifest = self.load(path)
        return manifest.script_names if manifest else []

    def dependencies(self, source: str | Manifest) -> list[str]:
        """Dependency and dev dependency names for a path or a loaded manifest."""
        manifest = self.load(source) if isinstance(source, str) else source
        return manifest.dependency_names if manifest else []

    # -- Filesystem ------------------------------------------------------------

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def list_dirs(self, path: str) -> list[str]:
        folder = self.resolve(path)
        if not folder.is_dir():
            return []
        return sorted(entry.name for entry in folder.iterdir() if entry.is_dir())

    def make_dir(self, path: str) -> None:
        self.resolve(path).mkdir(parents=True, exist_ok=True)

    def write_text(self, path: str, text: str) -> None:
        _atomic_write(self.resolve(path), text)

    def remove(self, path: str) -> None:
        _remove(self.resolve(path))


# -- Sync helpers --------------------------------------------------------------


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    The temp file is created in the same directory so ``os.replace`` is
    atomic on POSIX.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def _read_file(path: Path) -> str:
    """Read file contents.  Raises ``FileNotFoundError`` if missing."""
    return path.read_text(encoding="utf-8")


def _remove(path: Path) -> None:
    """Remove a file, symlink or directory tree.  No-op if path doesn't exist."""
    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
    elif path.exists():
        shutil.rmtree(path)
