"""Manifest store implementations."""

from spaceman.store.base import ManifestStore
from spaceman.store.local import LocalManifestStore

__all__ = ["LocalManifestStore", "ManifestStore"]
