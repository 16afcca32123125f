"""Choice models shared by the workspace index and the prompter."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Choice(BaseModel):
    """One selectable item: what the user sees and what the answer resolves to."""

    label: str
    value: Any = None

    @property
    def resolved(self) -> Any:
        return self.label if self.value is None else self.value


class ChoiceGroup(BaseModel):
    """A heading followed by its choices."""

    heading: str
    choices: list[Choice] = Field(default_factory=list)


def make_choices_group(heading: str, choices: list[Choice | str]) -> ChoiceGroup:
    """Build a group from ``Choice`` objects or plain strings."""
    return ChoiceGroup(
        heading=heading,
        choices=[c if isinstance(c, Choice) else Choice(label=c) for c in choices],
    )


def flatten_choices(choices: list[ChoiceGroup | Choice | str]) -> list[Choice]:
    """Flatten grouped and plain choices into a single ordered list."""
    flat: list[Choice] = []
    for item in choices:
        if isinstance(item, ChoiceGroup):
            flat.extend(item.choices)
        elif isinstance(item, Choice):
            flat.append(item)
        else:
            flat.append(Choice(label=item))
    return flat
