"""Interactive tasks.

This package contains the task-flow components:

- **engine**: Pipeline runner (steps -> Continue / Cancelled / Chain)
- **steps**: Prompt steps (workspace, packages, groups, scripts, confirmations)
- **actions**: Side-effecting final steps (commands, manifest edits, folders)
- **registry**: Task name -> pipeline table
"""

from spaceman.tasks.engine import TaskResult, UnknownTaskError, run_task

__all__ = ["TaskResult", "UnknownTaskError", "run_task"]
