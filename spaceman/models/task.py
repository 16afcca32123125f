"""Task input accumulator and step outcomes.

Every step of a task pipeline receives the ``TaskInput`` collected so far and
returns an ``Outcome``:

- ``Continue``  -- carry on with the (possibly extended) input
- ``Cancelled`` -- stop the pipeline cleanly (user abort, declined confirm)
- ``Chain``     -- stop this pipeline and start another task with a seed

``TaskInput`` is immutable.  ``with_fields`` returns a new record holding all
previous fields plus the new ones, so a step can never drop an answer given
earlier in the same task.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class TaskInput(Mapping[str, Any]):
    """Answers collected while running one task."""

    task: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def with_fields(self, **values: Any) -> TaskInput:
        return TaskInput(task=self.task, fields={**self.fields, **values})

    def __getitem__(self, key: str) -> Any:
        if key == "task":
            return self.task
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        yield "task"
        yield from self.fields

    def __len__(self) -> int:
        return len(self.fields) + 1


@dataclass(frozen=True)
class Continue:
    input: TaskInput
    rebuild_index: bool = False
    """Set by actions that created or removed workspaces."""


@dataclass(frozen=True)
class Cancelled:
    reason: str = ""


@dataclass(frozen=True)
class Chain:
    """Start *task* next, seeded with *seed* (the ``task`` field is reset)."""

    task: str
    seed: Mapping[str, Any] = field(default_factory=dict)


Outcome = Continue | Cancelled | Chain
