"""Task actions -- the side-effecting last steps of each task.

Actions read manifests fresh from the store, change them, write them back
and run package-manager commands through the shell.  Deleting something that
is already gone is not an error.  A failing command raises
``CommandFailedError`` and nothing after it runs; manifests written before
that point stay written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from loguru import logger

from spaceman.index import group_pattern, workspace_path
from spaceman.models.enums import PackageTask
from spaceman.models.task import Continue, Outcome, TaskInput
from spaceman.models.workspace import ROOT_GROUP
from spaceman.packages import build_command, run_script_command
from spaceman.scaffold import build_manifest, render_main_file

if TYPE_CHECKING:
    from spaceman.context import SpacemanContext


def _title(text: str) -> None:
    click.echo(f"\n{text}")


def _relative(path: str) -> str:
    return path.lstrip("/")


# ---------------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------------


def run_command(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Run an install, uninstall or update command in one workspace."""
    task = input.task
    packages = input.get("packages", "")
    workspace = input.get("workspace", "")
    if task and packages and workspace:
        _title(f"Running: {task}")
        command = build_command(task, input.get("dep_type", ""), workspace, packages, manager=ctx.manager)
        ctx.shell.check(command)
    click.echo()
    return Continue(input)


def reset_packages(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Remove caches, lock files and installed modules, then reinstall."""
    # The lock files are about to go, so decide the manager first.
    command = build_command(manager=ctx.manager)

    def existing(path: str = "") -> list[str]:
        candidates = [f"{path}/{name}" for name in ctx.settings.reset_paths]
        return [candidate for candidate in candidates if ctx.store.exists(candidate)]

    def remove(paths: list[str]) -> None:
        for path in paths:
            click.echo(click.style("» ", fg="bright_black") + click.style(f"rm -rf .{path}", fg="red"))
            ctx.store.remove(path)

    paths = [p for workspace in ctx.index for p in existing(workspace.path)]
    if paths:
        _title("Resetting workspaces:")
        remove(paths)

    paths = existing()
    if paths:
        _title("Resetting root:")
        remove(paths)

    _title("Reinstalling packages:")
    ctx.shell.check(command)
    return Continue(input)


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


def share_workspace(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Add the source workspace as a ``*`` dependency of every target."""
    source = ctx.index.get(input["source"])
    if source is None:
        msg = f"Unknown workspace: {input['source']}"
        raise LookupError(msg)

    targets = input["target"]
    if isinstance(targets, str):
        targets = [targets]

    click.echo()
    for target in targets:
        workspace = ctx.index.get(target)
        if workspace is None:
            logger.warning("Share: skipping unknown workspace {}", target)
            continue
        data = ctx.store.read(workspace.path)
        if data is None:
            logger.warning("Share: no manifest at {}", workspace.path)
            continue
        dependencies = dict(data.get("dependencies") or {})
        dependencies[source.name] = "*"
        data["dependencies"] = dict(sorted(dependencies.items()))

        click.echo(f"Updating: {_relative(workspace.path)}/package.json")
        ctx.store.write(workspace.path, data)

    _title("Installing dependencies:")
    ctx.shell.check(build_command(manager=ctx.manager), silent=True)
    return Continue(input)


def add_workspace_entry(ctx: SpacemanContext, entry: str) -> None:
    """Append *entry* to the root ``workspaces`` (once) and persist."""
    data = ctx.store.read() or {}
    entries = list(data.get("workspaces") or [])
    if entry not in entries:
        entries.append(entry)
    data["workspaces"] = entries
    ctx.store.write("", data)


def create_workspace_group(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Create the group folder and register ``{group}/*`` in the root manifest."""
    group = input["group"]
    _title(f"Creating group: {group}")
    ctx.store.make_dir(group)
    add_workspace_entry(ctx, group_pattern(group))
    return Continue(input)


def create_workspace(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Create the folder and manifest, scaffold the main file, install dependencies."""
    group = input["group"]
    options = dict(input["options"])
    name = options["name"]
    folder = name.rsplit("/", 1)[-1]  # in case a namespace was used
    path = workspace_path(group, folder)
    main = options.get("main", "")

    _title(f"Creating folder: {_relative(path)}")
    ctx.store.make_dir(path)
    if group == ROOT_GROUP:
        # Root-level workspaces are listed one by one in the root manifest.
        add_workspace_entry(ctx, folder)

    _title(f"Writing: {_relative(path)}/package.json")
    data = build_manifest(
        name=name,
        description=options.get("description", ""),
        main=main,
        dev=options.get("dev", ""),
        build=options.get("build", ""),
        test=options.get("test", ""),
    )
    ctx.store.write(path, data)

    if main:
        ctx.store.write_text(f"{path}/{main}", render_main_file(name, folder))

    deps, devs = options.get("deps", ""), options.get("devs", "")
    if deps or devs:
        click.echo()
        if deps:
            click.echo("Installing dependencies:")
            ctx.shell.check(build_command(PackageTask.INSTALL, "", name, deps, manager=ctx.manager))
        if devs:
            click.echo("Installing dev dependencies:")
            ctx.shell.check(build_command(PackageTask.INSTALL, "dev", name, devs, manager=ctx.manager))

    return Continue(input, rebuild_index=True)


def remove_workspace(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Uninstall a workspace everywhere, delete it and tidy the root manifest."""
    workspace = ctx.index.get(input["workspace"])
    if workspace is None:
        return Continue(input)
    manifest = ctx.store.load(workspace.path)
    if manifest is None:
        return Continue(input)

    # -- Dependents ------------------------------------------------------------
    dependents = [
        other.name
        for other in ctx.index
        if other.name != workspace.name and workspace.name in ctx.store.dependencies(other.path)
    ]
    if dependents:
        _title("Uninstalling from workspaces:")
        for dependent in dependents:
            command = build_command(PackageTask.UNINSTALL, "", dependent, workspace.name, manager=ctx.manager)
            ctx.shell.check(command, silent=True)

    # -- Own dependencies ------------------------------------------------------
    names = " ".join(manifest.dependency_names)
    if names:
        _title("Uninstalling dependencies:")
        command = build_command(PackageTask.UNINSTALL, "", workspace.name, names, manager=ctx.manager)
        ctx.shell.check(command, silent=True)

    # -- Folder ----------------------------------------------------------------
    _title(f"Removing workspace: {workspace.relative_path}")
    ctx.store.remove(workspace.path)

    # -- Root manifest ---------------------------------------------------------
    data = ctx.store.read()
    if data is not None:
        entries = [entry for entry in data.get("workspaces") or [] if entry != workspace.relative_path]
        if workspace.group and not ctx.store.list_dirs(workspace.group):
            _title(f"Removing empty workspace group: {workspace.group}")
            entries = [entry for entry in entries if entry != group_pattern(workspace.group)]
            ctx.store.remove(workspace.group)
        data["workspaces"] = entries
        _title("Updating: package.json")
        ctx.store.write("", data)

    return Continue(input, rebuild_index=True)


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------


def run_script(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Run the chosen script from its workspace folder."""
    script = input["script"]
    path, name = script["path"], script["name"]
    _title("Running script:")
    cwd = ctx.root / _relative(path) if path else ctx.root
    ctx.shell.check(run_script_command(ctx.manager, name), cwd=cwd)
    return Continue(input)
