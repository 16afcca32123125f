"""Package-manager dialects and command construction.

The manager is detected from lock files at the repository root on every call
(``yarn.lock`` -> yarn, ``pnpm-lock.yaml`` -> pnpm, otherwise npm).  Each
manager's spelling of the dependency operations lives in ``DIALECTS``;
``build_command`` only looks things up and joins strings.

Examples::

    yarn workspace ui add lodash --dev
    npm install --workspace=ui lodash --save-dev
    pnpm uninstall --workspace=ui left-pad
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from spaceman.models.enums import PackageManager, PackageTask
from spaceman.store.base import ManifestStore

LOCK_FILES: dict[PackageManager, str] = {
    PackageManager.YARN: "yarn.lock",
    PackageManager.PNPM: "pnpm-lock.yaml",
}
"""Checked in order; the first lock file found decides the manager."""

DEP_TYPES: dict[str, str] = {
    "normal": "",
    "development": "dev",
    "peer": "peer",
}
"""Dependency type choice -> value passed to ``build_command``."""

_NAME_RX = re.compile(r"^[\da-z][-+.\da-z]+$")


@dataclass(frozen=True)
class Dialect:
    """How one package manager spells the dependency operations."""

    ops: dict[PackageTask, str]
    scope: str
    """Format of a workspace-scoped operation, with ``{op}`` and ``{workspace}``."""
    dep_flag: str
    """Format of the dependency-type flag, with ``{dep_type}``."""
    save_flag: str = ""
    """Flag for a normal dependency when packages are given."""
    reinstall: str = "install"
    """Operation for a bare install: no workspace, no packages."""
    run: str = "{manager} run"


DIALECTS: dict[PackageManager, Dialect] = {
    PackageManager.YARN: Dialect(
        ops={
            PackageTask.INSTALL: "add",
            PackageTask.UNINSTALL: "remove",
            PackageTask.UPDATE: "upgrade",
        },
        scope="workspace {workspace} {op}",
        dep_flag="--{dep_type}",
        run="{manager}",
    ),
    PackageManager.NPM: Dialect(
        ops={
            PackageTask.INSTALL: "install",
            PackageTask.UNINSTALL: "uninstall",
            PackageTask.UPDATE: "update",
        },
        scope="{op} --workspace={workspace}",
        dep_flag="--save-{dep_type}",
        save_flag="--save",
    ),
}
DIALECTS[PackageManager.PNPM] = DIALECTS[PackageManager.NPM]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def detect_manager(store: ManifestStore) -> PackageManager:
    """Package manager in use, judged by root lock files."""
    for manager, lock_file in LOCK_FILES.items():
        if store.exists(lock_file):
            return manager
    return PackageManager.NPM


def build_command(
    task: PackageTask | str = PackageTask.INSTALL,
    dep_type: str = "",
    workspace: str = "",
    packages: str = "",
    *,
    manager: PackageManager,
) -> str:
    """Build a manager-specific install / uninstall / update command.

    Called with no task, workspace or packages it yields the bare install
    used to reinstall everything.  The dependency-type flag is only added
    for installs.

    Raises ``ValueError`` for an unknown task or dependency type.
    """
    task = PackageTask(task)
    if dep_type not in DEP_TYPES.values():
        msg = f"Unknown dependency type: {dep_type!r}"
        raise ValueError(msg)

    dialect = DIALECTS[manager]
    op = dialect.ops[task]
    if workspace:
        command = dialect.scope.format(op=op, workspace=workspace)
    elif task == PackageTask.INSTALL and not packages.strip():
        command = dialect.reinstall
    else:
        command = op

    flag = ""
    if task == PackageTask.INSTALL:
        if dep_type:
            flag = dialect.dep_flag.format(dep_type=dep_type)
        elif packages.strip():
            flag = dialect.save_flag

    return _collapse(f"{manager} {command} {packages} {flag}")


def run_script_command(manager: PackageManager, script: str) -> str:
    """``yarn dev`` / ``npm run dev`` / ``pnpm run dev``."""
    runner = DIALECTS[manager].run.format(manager=manager)
    return _collapse(f"{runner} {script}")


def is_valid_name(name: str) -> bool:
    """Package / folder name check, allowing an ``@scope/name`` namespace."""
    if name.startswith("@"):
        parts = name[1:].split("/")
        return len(parts) == 2 and all(_NAME_RX.fullmatch(part) for part in parts)
    return bool(_NAME_RX.fullmatch(name))


def _collapse(command: str) -> str:
    return " ".join(command.split())
