"""Interactive prompts.

The task engine talks to the user through the ``Prompter`` protocol:

- ``ask(name, message, ...)`` -- text input, select, multi-select or
  autocomplete, chosen by ``type`` (``select`` when only ``choices`` given)
- ``confirm(message)``       -- yes / no
- ``heading(text)``          -- a section title between prompts

``validate`` receives the stripped answer and returns ``True`` or an error
message; on error the prompt re-asks.  ``result`` post-processes the answer
before it is returned.  When a text prompt has an ``initial`` value, an empty
answer takes it and ``-`` answers with nothing.  Aborting a prompt (Ctrl-C,
end of input) raises ``PromptCancelled``.

``ClickPrompter`` renders everything with click: choices are listed with
numbers under their group headings and can be picked by number or by label.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

import click

from spaceman.models.choice import Choice, ChoiceGroup, flatten_choices
from spaceman.models.enums import PromptType

Validator = Callable[[Any], "bool | str"]
ResultProc = Callable[[Any], Any]
Choices = Sequence[ChoiceGroup | Choice | str]

CLEAR_ANSWER = "-"
"""Typed at a prompt with an initial value to answer with nothing."""


class PromptCancelled(Exception):  # noqa: N818
    """The user aborted a prompt."""


@runtime_checkable
class Prompter(Protocol):
    def ask(
        self,
        name: str,
        message: str,
        *,
        choices: Choices | None = None,
        type: PromptType | str | None = None,  # noqa: A002
        validate: Validator | None = None,
        initial: Any = None,
        result: ResultProc | None = None,
        limit: int | None = None,
    ) -> Any: ...

    def confirm(self, message: str, *, initial: bool = True) -> bool: ...

    def heading(self, text: str) -> None: ...


def resolve_prompt_type(choices: Choices | None, type: PromptType | str | None) -> PromptType:  # noqa: A002
    if type:
        return PromptType(type)
    return PromptType.SELECT if choices else PromptType.INPUT


def require_selection(answer: Sequence[Any]) -> bool | str:
    """Default multi-select validator."""
    if len(answer) == 0:
        return "You must choose at least one item"
    return True


def fuzzy_match(query: str, label: str) -> bool:
    """True when every character of *query* appears in *label*, in order."""
    remaining = iter(label.lower())
    return all(char in remaining for char in query.lower())


def run_validator(validate: Validator | None, answer: Any) -> None:
    """Raise ``click.BadParameter`` when *validate* rejects *answer*."""
    if validate is None:
        return
    verdict = validate(answer)
    if verdict is True:
        return
    message = verdict if isinstance(verdict, str) and verdict else "Invalid value"
    raise click.BadParameter(message)


# ---------------------------------------------------------------------------
# Click implementation
# ---------------------------------------------------------------------------


class ClickPrompter:
    """Terminal prompter built on ``click.prompt`` / ``click.confirm``."""

    def __init__(self, autocomplete_limit: int = 10) -> None:
        self.autocomplete_limit = autocomplete_limit

    def ask(
        self,
        name: str,
        message: str,
        *,
        choices: Choices | None = None,
        type: PromptType | str | None = None,  # noqa: A002
        validate: Validator | None = None,
        initial: Any = None,
        result: ResultProc | None = None,
        limit: int | None = None,
    ) -> Any:
        kind = resolve_prompt_type(choices, type)
        if kind == PromptType.MULTISELECT and validate is None:
            validate = require_selection

        try:
            if kind == PromptType.INPUT:
                answer = self._input(message, validate, initial)
            elif kind == PromptType.SELECT:
                answer = self._select(message, choices or [], validate)
            elif kind == PromptType.MULTISELECT:
                answer = self._multiselect(message, choices or [], validate)
            else:
                answer = self._autocomplete(message, choices or [], validate, limit or self.autocomplete_limit)
        except click.Abort as exc:
            raise PromptCancelled(name) from exc

        return result(answer) if result else answer

    def confirm(self, message: str, *, initial: bool = True) -> bool:
        try:
            return click.confirm(message, default=initial)
        except click.Abort as exc:
            raise PromptCancelled(message) from exc

    def heading(self, text: str) -> None:
        click.secho(f"\n  {text} :", fg="bright_black")

    # -- Prompt flavours -------------------------------------------------------

    def _input(self, message: str, validate: Validator | None, initial: Any) -> str:
        """Text answer.  With an *initial* value, ``-`` clears the answer."""

        def proc(value: str) -> str:
            answer = value.strip()
            if initial and answer == CLEAR_ANSWER:
                answer = ""
            run_validator(validate, answer)
            return answer

        return click.prompt(
            f"{message} ({CLEAR_ANSWER} for none)" if initial else message,
            default=initial if initial is not None else "",
            show_default=bool(initial),
            value_proc=proc,
        )

    def _select(self, message: str, choices: Choices, validate: Validator | None) -> Any:
        flat = self._render(choices)

        def proc(value: str) -> Any:
            choice = _pick(flat, value.strip())
            if choice is None:
                raise click.BadParameter(f"Choose a number between 1 and {len(flat)}")
            run_validator(validate, choice.resolved)
            return choice.resolved

        return click.prompt(message, value_proc=proc)

    def _multiselect(self, message: str, choices: Choices, validate: Validator | None) -> list[Any]:
        flat = self._render(choices)

        def proc(value: str) -> list[Any]:
            picked: list[Any] = []
            for token in value.replace(",", " ").split():
                choice = _pick(flat, token)
                if choice is None:
                    raise click.BadParameter(f"Unknown choice: {token}")
                if choice.resolved not in picked:
                    picked.append(choice.resolved)
            run_validator(validate, picked)
            return picked

        return click.prompt(f"{message} (space separated)", default="", show_default=False, value_proc=proc)

    def _autocomplete(self, message: str, choices: Choices, validate: Validator | None, limit: int) -> Any:
        flat = flatten_choices(list(choices))
        while True:
            query = click.prompt(f"{message} (type to filter)", default="", show_default=False).strip()
            exact = [c for c in flat if click.unstyle(c.label) == query]
            matches = exact or [c for c in flat if fuzzy_match(query, click.unstyle(c.label))]
            if not matches:
                click.echo("No matches")
                continue
            if len(matches) > limit:
                click.echo(f"{len(matches)} matches, type more to narrow them down to {limit}")
                continue
            if len(matches) == 1:
                choice = matches[0]
                try:
                    run_validator(validate, choice.resolved)
                except click.BadParameter as exc:
                    click.echo(f"Error: {exc.message}")
                    continue
                return choice.resolved
            return self._select(message, matches, validate)

    def _render(self, choices: Choices) -> list[Choice]:
        flat: list[Choice] = []
        for item in choices:
            if isinstance(item, ChoiceGroup):
                click.secho(item.heading, fg="red")
                entries = item.choices
            else:
                entries = flatten_choices([item])
            for choice in entries:
                flat.append(choice)
                click.echo(f"  {len(flat)}) {choice.label}")
        return flat


def _pick(flat: list[Choice], token: str) -> Choice | None:
    """Resolve a 1-based number or an exact label."""
    if token.isdigit():
        index = int(token) - 1
        return flat[index] if 0 <= index < len(flat) else None
    for choice in flat:
        if choice.label == token:
            return choice
    return None
