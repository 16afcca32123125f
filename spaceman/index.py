"""Workspace index.

Expands the root manifest's ``workspaces`` entries into a flat list of
``Workspace`` records:

- ``apps/*``  -> every immediate subdirectory of ``apps`` holding a named
                 manifest becomes a workspace in group ``apps``
- ``tools``   -> the single directory ``tools``, group ``""`` (root)

Candidates without a readable, named manifest are skipped silently.  A
missing root manifest or a root manifest without ``workspaces`` is fatal.

The index is a value: it is built once and never refreshed behind the
caller's back.  Actions that change the set of workspaces ask the task
engine to ``rebuild()`` it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from loguru import logger

from spaceman.models.choice import Choice, ChoiceGroup, make_choices_group
from spaceman.models.workspace import ROOT_GROUP, Workspace
from spaceman.store.base import ManifestStore

GROUP_SUFFIX = "/*"

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(RuntimeError):
    """The repository cannot be managed at all."""


class NoRootManifestError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("No package file in this folder")


class NoWorkspacesError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("No workspaces in this package")


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def workspace_path(group: str, folder: str) -> str:
    """Root-relative path of a workspace, factoring out the root sentinel."""
    if not group or group == ROOT_GROUP:
        return f"/{folder}"
    return f"/{group}/{folder}"


def group_pattern(group: str) -> str:
    """``apps`` -> ``apps/*``."""
    return f"{group}{GROUP_SUFFIX}"


def is_group_pattern(entry: str) -> bool:
    return entry.endswith(GROUP_SUFFIX)


def strip_group_pattern(entry: str) -> str:
    return entry.removesuffix(GROUP_SUFFIX)


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


class WorkspaceIndex:
    """Immutable snapshot of the workspaces declared by the root manifest."""

    def __init__(self, store: ManifestStore, workspaces: Iterable[Workspace]) -> None:
        self.store = store
        self._workspaces = tuple(workspaces)

    @classmethod
    def build(cls, store: ManifestStore) -> WorkspaceIndex:
        """Scan the root manifest's ``workspaces`` entries in order.

        Raises ``NoRootManifestError`` / ``NoWorkspacesError``.
        """
        root = store.read()
        if root is None:
            raise NoRootManifestError
        entries = root.get("workspaces")
        if entries is None:
            raise NoWorkspacesError

        found: list[Workspace] = []
        for entry in entries:
            if is_group_pattern(entry):
                group = strip_group_pattern(entry)
                if not store.exists(group):
                    logger.debug("Index: group folder {} does not exist", group)
                    continue
                for folder in store.list_dirs(group):
                    workspace = _workspace_info(store, folder, group)
                    if workspace:
                        found.append(workspace)
            else:
                workspace = _workspace_info(store, entry.strip("/"))
                if workspace:
                    found.append(workspace)

        logger.debug("Index: {} workspaces from {} entries", len(found), len(entries))
        return cls(store, found)

    def rebuild(self) -> WorkspaceIndex:
        """A fresh index read from the same store."""
        return type(self).build(self.store)

    # -- Query -----------------------------------------------------------------

    @property
    def workspaces(self) -> list[Workspace]:
        return list(self._workspaces)

    def __iter__(self) -> Iterator[Workspace]:
        return iter(self._workspaces)

    def __len__(self) -> int:
        return len(self._workspaces)

    def get(self, value: str, key: str = "name") -> Workspace | None:
        """First workspace whose *key* field equals *value*, else ``None``."""
        for workspace in self._workspaces:
            if getattr(workspace, key, None) == value:
                return workspace
        return None

    def names(self) -> list[str]:
        return [w.name for w in self._workspaces]

    def groups(self) -> list[str]:
        """Group prefixes declared in the root manifest (read fresh from disk)."""
        root = self.store.read() or {}
        return [strip_group_pattern(entry) for entry in root.get("workspaces") or [] if entry.endswith("*")]

    def group_folders(self, group: str) -> list[str]:
        """Subdirectories of a group folder."""
        return self.store.list_dirs(group)

    # -- Choices ---------------------------------------------------------------

    def choices(self, subset: Iterable[Workspace] | None = None) -> list[ChoiceGroup]:
        """Grouped choices for a workspace prompt.

        Groups are sorted by name with the root group last.  Grouped items show
        the workspace name, root items show the folder; every choice resolves to
        the workspace name.
        """
        workspaces = self._workspaces if subset is None else subset
        groups: dict[str, list[Choice]] = {}
        root: list[Choice] = []
        for workspace in workspaces:
            if not workspace.group:
                root.append(Choice(label=workspace.folder, value=workspace.name))
                continue
            groups.setdefault(workspace.group, []).append(Choice(label=workspace.name, value=workspace.name))

        result = [make_choices_group(group, groups[group]) for group in sorted(groups)]
        if root:
            result.append(make_choices_group(ROOT_GROUP, root))
        return result


def _workspace_info(store: ManifestStore, folder: str, group: str = "") -> Workspace | None:
    path = workspace_path(group, folder)
    data = store.read(path)
    name = data.get("name") if data else None
    if not isinstance(name, str) or not name:
        logger.debug("Index: skipping {} (no named manifest)", path)
        return None
    return Workspace(
        name=name,
        folder=folder.rsplit("/", 1)[-1],
        group=group,
        path=path,
    )
