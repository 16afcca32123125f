"""Task pipelines.

Each task maps to the ordered steps the engine runs for it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from spaceman.models.enums import TaskName
from spaceman.tasks import actions, steps

if TYPE_CHECKING:
    from spaceman.tasks.engine import Step

_PACKAGE_STEPS: list[Step] = [steps.choose_workspace, steps.choose_packages]

PIPELINES: dict[str, list[Step]] = {
    TaskName.RUN: [
        steps.choose_script,
        actions.run_script,
    ],
    TaskName.INSTALL: [
        *_PACKAGE_STEPS,
        steps.choose_dep_type,
        steps.confirm_task,
        actions.run_command,
    ],
    TaskName.UNINSTALL: [
        *_PACKAGE_STEPS,
        steps.confirm_task,
        actions.run_command,
    ],
    TaskName.UPDATE: [
        *_PACKAGE_STEPS,
        steps.confirm_task,
        actions.run_command,
    ],
    TaskName.RESET: [
        steps.confirm_task,
        actions.reset_packages,
    ],
    TaskName.SHARE: [
        steps.choose_workspace_by_type("source"),
        steps.choose_workspace_by_type("target", multi=True),
        steps.confirm_task,
        actions.share_workspace,
    ],
    TaskName.GROUP: [
        steps.choose_group_name,
        steps.confirm_task,
        actions.create_workspace_group,
        steps.confirm_add_workspace,
    ],
    TaskName.ADD: [
        steps.choose_group,
        steps.choose_workspace_options,
        steps.confirm_task,
        actions.create_workspace,
    ],
    TaskName.REMOVE: [
        steps.choose_workspace,
        steps.confirm_remove_workspace,
        actions.remove_workspace,
    ],
}
