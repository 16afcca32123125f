"""Run context.

Everything a task needs is carried on one ``SpacemanContext`` built at
startup and handed to every step: the manifest store, the workspace index,
the prompter, the shell and the settings.  Nothing is read from module-level
state.

The index is the only field that changes during a run: the task engine swaps
in a rebuilt index when an action reports that it created or removed
workspaces.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from spaceman.index import WorkspaceIndex
from spaceman.models.enums import PackageManager
from spaceman.packages import detect_manager
from spaceman.prompts import ClickPrompter, Prompter
from spaceman.settings import SpacemanSettings, apply_manifest_settings
from spaceman.shell import Shell, SubprocessShell
from spaceman.store.base import ManifestStore
from spaceman.store.local import LocalManifestStore


@dataclass
class SpacemanContext:
    """State shared by the steps of a run."""

    store: ManifestStore
    index: WorkspaceIndex
    prompter: Prompter
    shell: Shell
    settings: SpacemanSettings

    @property
    def root(self) -> Path:
        return Path(self.settings.root)

    @property
    def manager(self) -> PackageManager:
        """Detected afresh on every access; lock files can appear mid-run."""
        return detect_manager(self.store)

    def rebuild_index(self) -> None:
        self.index = self.index.rebuild()


def create_context(
    settings: SpacemanSettings,
    *,
    prompter: Prompter | None = None,
    shell: Shell | None = None,
    store: ManifestStore | None = None,
) -> SpacemanContext:
    """Build the run context for the repository at ``settings.root``.

    Raises ``ConfigurationError`` when the root manifest is missing, has no
    ``workspaces`` or carries an invalid ``spaceman`` block.
    """
    store = store or LocalManifestStore(settings.root)
    index = WorkspaceIndex.build(store)
    settings = apply_manifest_settings(settings, store.read())
    return SpacemanContext(
        store=store,
        index=index,
        prompter=prompter or ClickPrompter(autocomplete_limit=settings.autocomplete_limit),
        shell=shell or SubprocessShell(settings.root),
        settings=settings,
    )
