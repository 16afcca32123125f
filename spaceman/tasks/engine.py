"""Task engine -- runs a task's pipeline of steps.

How it works:

- a task is a fixed, ordered list of steps (see ``registry.PIPELINES``)
- each step is called with the run context and the ``TaskInput`` so far
- a step returns ``Continue`` with the input extended by its own answers,
  ``Cancelled`` to stop cleanly, or ``Chain`` to hand over to another task
- a ``Continue`` flagged ``rebuild_index`` makes the engine rebuild the
  workspace index before the next step runs

Manifest writes made before a cancellation stay on disk; there is no
rollback.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger

from spaceman.models.task import Cancelled, Chain, Continue, Outcome, TaskInput

if TYPE_CHECKING:
    from spaceman.context import SpacemanContext

Step = Callable[["SpacemanContext", TaskInput], Outcome]


class UnknownTaskError(LookupError):
    def __init__(self, task: str) -> None:
        super().__init__(f'Unknown task "{task}"')


class DroppedFieldsError(RuntimeError):
    """A step returned an input missing fields collected earlier."""

    def __init__(self, step: str, missing: set[str]) -> None:
        super().__init__(f"Step {step} dropped input fields: {', '.join(sorted(missing))}")


@dataclass(frozen=True)
class TaskResult:
    """How a task run ended."""

    task: str
    input: TaskInput
    cancelled: bool = False
    reason: str = ""


def run_pipeline(ctx: SpacemanContext, steps: list[Step], input: TaskInput) -> Outcome:  # noqa: A002
    """Run *steps* in order, threading the input; stop at the first non-Continue."""
    for step in steps:
        name = getattr(step, "__name__", repr(step))
        logger.debug("Task {}: step {}", input.task, name)
        outcome = step(ctx, input)
        if not isinstance(outcome, Continue):
            return outcome

        missing = set(input) - set(outcome.input)
        if missing:
            raise DroppedFieldsError(name, missing)
        input = outcome.input  # noqa: A001

        if outcome.rebuild_index:
            logger.debug("Task {}: rebuilding workspace index", input.task)
            ctx.rebuild_index()
    return Continue(input)


def run_task(
    ctx: SpacemanContext,
    task: str,
    seed: Mapping[str, Any] | None = None,
    *,
    pipelines: Mapping[str, list[Step]] | None = None,
) -> TaskResult:
    """Run *task* (and any task it chains into) to completion or cancellation.

    Raises ``UnknownTaskError`` for a task without a pipeline.
    """
    if pipelines is None:
        from spaceman.tasks.registry import PIPELINES

        pipelines = PIPELINES

    while True:
        steps = pipelines.get(task)
        if steps is None:
            raise UnknownTaskError(task)

        fields = {key: value for key, value in (seed or {}).items() if key != "task"}
        input = TaskInput(task=task, fields=fields)  # noqa: A001
        outcome = run_pipeline(ctx, steps, input)

        if isinstance(outcome, Chain):
            logger.debug("Task {}: chaining into {}", task, outcome.task)
            task, seed = outcome.task, outcome.seed
            continue
        if isinstance(outcome, Cancelled):
            logger.debug("Task {}: cancelled ({})", task, outcome.reason or "no reason")
            return TaskResult(task=task, input=input, cancelled=True, reason=outcome.reason)
        return TaskResult(task=task, input=outcome.input)
