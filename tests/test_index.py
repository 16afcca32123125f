"""Unit tests for the workspace index."""

from __future__ import annotations

import pytest

from conftest import write_manifest
from spaceman.index import (
    NoRootManifestError,
    NoWorkspacesError,
    WorkspaceIndex,
    group_pattern,
    workspace_path,
)
from spaceman.models.workspace import ROOT_GROUP, Workspace
from spaceman.store.local import LocalManifestStore


def _build(root) -> WorkspaceIndex:
    return WorkspaceIndex.build(LocalManifestStore(root))


def test_glob_and_exact_entries(tmp_path) -> None:
    write_manifest(tmp_path, "", {"name": "root", "workspaces": ["a", "g/*"]})
    write_manifest(tmp_path, "/a", {"name": "a"})
    write_manifest(tmp_path, "/g/x", {"name": "x"})
    write_manifest(tmp_path, "/g/y", {"name": "y"})

    index = _build(tmp_path)

    assert set(index.workspaces) == {
        Workspace(name="a", folder="a", group="", path="/a"),
        Workspace(name="x", folder="x", group="g", path="/g/x"),
        Workspace(name="y", folder="y", group="g", path="/g/y"),
    }


def test_invalid_group_members_are_skipped(tmp_path) -> None:
    write_manifest(tmp_path, "", {"name": "root", "workspaces": ["g/*"]})
    write_manifest(tmp_path, "/g/ok", {"name": "ok"})
    write_manifest(tmp_path, "/g/nameless", {"version": "1.0.0"})
    write_manifest(tmp_path, "/g/empty-name", {"name": ""})
    (tmp_path / "g" / "no-manifest").mkdir()
    (tmp_path / "g" / "broken").mkdir()
    (tmp_path / "g" / "broken" / "package.json").write_text("{", encoding="utf-8")
    (tmp_path / "g" / "file.txt").write_text("not a folder", encoding="utf-8")

    index = _build(tmp_path)

    assert index.names() == ["ok"]


def test_named_workspace_with_odd_fields_is_kept(tmp_path) -> None:
    write_manifest(tmp_path, "", {"name": "root", "workspaces": ["apps/*", "tools"]})
    write_manifest(tmp_path, "/apps/mobile", {"name": "mobile", "workspaces": {"nohoist": ["react-native/**"]}})
    write_manifest(tmp_path, "/apps/web", {"name": "web", "dependencies": None, "scripts": None})
    write_manifest(tmp_path, "/apps/numbered", {"name": 7})
    write_manifest(tmp_path, "/tools", {"name": "tools", "devDependencies": ["x"]})

    index = _build(tmp_path)

    assert index.names() == ["mobile", "web", "tools"]


def test_missing_group_folder_and_missing_exact_entry(tmp_path) -> None:
    write_manifest(tmp_path, "", {"name": "root", "workspaces": ["missing/*", "gone", "here"]})
    write_manifest(tmp_path, "/here", {"name": "here"})

    assert _build(tmp_path).names() == ["here"]


def test_no_root_manifest_is_fatal(tmp_path) -> None:
    with pytest.raises(NoRootManifestError, match="No package file"):
        _build(tmp_path)


def test_no_workspaces_field_is_fatal(tmp_path) -> None:
    write_manifest(tmp_path, "", {"name": "root"})
    with pytest.raises(NoWorkspacesError, match="No workspaces"):
        _build(tmp_path)


def test_empty_workspaces_list_is_allowed(tmp_path) -> None:
    write_manifest(tmp_path, "", {"name": "root", "workspaces": []})
    assert len(_build(tmp_path)) == 0


def test_get_by_name_and_folder(repo) -> None:
    index = _build(repo)

    core = index.get("@acme/core")
    assert core is not None
    assert core.folder == "core"
    assert core.group == "packages"
    assert core.path == "/packages/core"
    assert core.relative_path == "packages/core"

    assert index.get("core", key="folder") == core
    assert index.get("nope") is None
    assert index.get("x", key="no-such-field") is None


def test_choices_grouped_sorted_root_last(repo) -> None:
    groups = _build(repo).choices()

    assert [g.heading for g in groups] == ["apps", "packages", ROOT_GROUP]
    assert {c.label for c in groups[0].choices} == {"web", "docs"}
    assert {c.label for c in groups[1].choices} == {"@acme/core", "utils"}
    assert [(c.label, c.value) for c in groups[2].choices] == [("tools", "tools")]


def test_choices_root_items_show_folder_resolve_to_name(tmp_path) -> None:
    write_manifest(tmp_path, "", {"name": "root", "workspaces": ["lib"]})
    write_manifest(tmp_path, "/lib", {"name": "@acme/lib"})

    [group] = _build(tmp_path).choices()
    [choice] = group.choices
    assert group.heading == ROOT_GROUP
    assert choice.label == "lib"
    assert choice.resolved == "@acme/lib"


def test_choices_subset(repo) -> None:
    index = _build(repo)
    subset = [w for w in index if w.group == "apps"]

    groups = index.choices(subset)
    assert [g.heading for g in groups] == ["apps"]


def test_groups_and_folders(repo) -> None:
    index = _build(repo)
    assert index.groups() == ["apps", "packages"]
    assert index.group_folders("apps") == ["docs", "web"]


def test_rebuild_sees_new_workspaces(repo) -> None:
    index = _build(repo)
    write_manifest(repo, "/apps/admin", {"name": "admin"})

    assert index.get("admin") is None
    assert index.rebuild().get("admin") is not None


def test_path_helpers() -> None:
    assert workspace_path(ROOT_GROUP, "tools") == "/tools"
    assert workspace_path("", "tools") == "/tools"
    assert workspace_path("apps", "web") == "/apps/web"
    assert group_pattern("apps") == "apps/*"
