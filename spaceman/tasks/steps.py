"""Prompt steps.

Each step asks one question (or a short series, for workspace options) and
returns the input extended with the answer.  Aborting a prompt or declining a
confirmation returns ``Cancelled``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

from spaceman.index import workspace_path
from spaceman.models.choice import Choice, make_choices_group
from spaceman.models.enums import PromptType, TaskName
from spaceman.models.task import Cancelled, Chain, Continue, Outcome, TaskInput
from spaceman.models.workspace import ROOT_GROUP
from spaceman.packages import DEP_TYPES, is_valid_name
from spaceman.prompts import PromptCancelled
from spaceman.scaffold import default_main_file

if TYPE_CHECKING:
    from spaceman.context import SpacemanContext
    from spaceman.tasks.engine import Step

# ---------------------------------------------------------------------------
# Prompt helpers
# ---------------------------------------------------------------------------


def prompt(ctx: SpacemanContext, input: TaskInput, name: str, message: str, **options: Any) -> Outcome:  # noqa: A002
    """Ask a question and store the answer under *name*."""
    try:
        answer = ctx.prompter.ask(name, message, **options)
    except PromptCancelled:
        return Cancelled(name)
    if isinstance(answer, str):
        answer = answer.strip()
    return Continue(input.with_fields(**{name: answer}))


def confirm(ctx: SpacemanContext, input: TaskInput, message: str) -> Outcome:  # noqa: A002
    try:
        answer = ctx.prompter.confirm(message, initial=True)
    except PromptCancelled:
        return Cancelled("confirm")
    return Continue(input) if answer else Cancelled("declined")


def chain(*steps: Step) -> Step:
    """Combine several steps into one."""

    def combined(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
        for step in steps:
            outcome = step(ctx, input)
            if not isinstance(outcome, Continue):
                return outcome
            input = outcome.input  # noqa: A001
        return Continue(input)

    return combined


def ask(name: str, message: str, **options: Any) -> Step:
    """Step factory for a plain question with static options."""

    def step(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
        return prompt(ctx, input, name, message, **options)

    step.__name__ = f"ask_{name}"
    return step


def heading(text: str) -> Step:
    def step(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
        ctx.prompter.heading(text)
        return Continue(input)

    step.__name__ = "heading"
    return step


def confirm_task(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    return confirm(ctx, input, f"Confirm {input.task}?")


# ---------------------------------------------------------------------------
# Task chooser
# ---------------------------------------------------------------------------

TASK_CHOICES = [
    make_choices_group(title, [task.value for task in tasks])
    for title, tasks in (
        ("Scripts", [TaskName.RUN]),
        ("Packages", [TaskName.INSTALL, TaskName.UNINSTALL, TaskName.UPDATE, TaskName.RESET]),
        ("Workspaces", [TaskName.SHARE, TaskName.GROUP, TaskName.ADD, TaskName.REMOVE]),
    )
]


def choose_task(ctx: SpacemanContext) -> str | None:
    """Ask which task to run.  Returns ``None`` when the prompt is aborted."""
    try:
        return ctx.prompter.ask("task", "🚀 Task", choices=TASK_CHOICES)
    except PromptCancelled:
        return None


# ---------------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------------


def choose_workspace(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    return prompt(ctx, input, "workspace", "Workspace", choices=ctx.index.choices())


def validate_packages(answer: str) -> bool | str:
    if not answer.strip():
        return "Type one or more packages separated by spaces"
    return True


def choose_packages(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Free text for install; pick from declared dependencies otherwise."""
    if input.task == TaskName.INSTALL:
        return prompt(ctx, input, "packages", "Package(s)", validate=validate_packages)

    workspace = ctx.index.get(input["workspace"])
    choices = ctx.store.dependencies(workspace.path) if workspace else []
    if not choices:
        click.echo(f"\nWorkspace does not contain any packages to {input.task}")
        return Cancelled("no packages")

    return prompt(
        ctx,
        input,
        "packages",
        "Package(s)",
        type=PromptType.MULTISELECT,
        choices=choices,
        result=" ".join,
    )


def choose_dep_type(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    return prompt(
        ctx,
        input,
        "dep_type",
        "Dependency type",
        choices=list(DEP_TYPES),
        result=DEP_TYPES.__getitem__,
    )


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


def choose_workspace_by_type(type: str = "source", multi: bool = False) -> Step:  # noqa: A002
    """Step factory choosing a workspace into field *type*, never offering the source."""

    def step(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
        source = input.get("source")
        candidates = [w for w in ctx.index if w.name != source]
        message = f"{type.capitalize()} workspace"

        def validate(answer: Any) -> bool | str:
            if multi and len(answer) == 0:
                return "You must choose at least one workspace"
            return True

        return prompt(
            ctx,
            input,
            type,
            f"{message}(s)" if multi else message,
            type=PromptType.MULTISELECT if multi else PromptType.SELECT,
            choices=ctx.index.choices(candidates),
            validate=validate,
        )

    step.__name__ = f"choose_{type}_workspace"
    return step


def group_name_validator(ctx: SpacemanContext) -> Callable[[str], bool | str]:
    def validate(answer: str) -> bool | str:
        name = answer.strip()
        if not name:
            return "The workspace group must be named"
        if not is_valid_name(name):
            return "Workspace group must be a valid folder name"
        if ctx.store.exists(name):
            return "Workspace group conflicts with existing folder"
        return True

    return validate


def choose_group_name(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    return prompt(
        ctx,
        input,
        "group",
        "Group name",
        validate=group_name_validator(ctx),
        result=lambda answer: answer.strip().lower(),
    )


def choose_group(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Pick the group a new workspace goes into, unless one was seeded."""
    if input.get("group"):
        return Continue(input)
    return prompt(
        ctx,
        input,
        "group",
        "Workspace group",
        type=PromptType.SELECT,
        choices=[*ctx.index.groups(), ROOT_GROUP],
    )


def workspace_name_validator(ctx: SpacemanContext, group: str) -> Callable[[str], bool | str]:
    def validate(answer: str) -> bool | str:
        name = answer.strip()
        if not name:
            return "The workspace must be named"
        if not is_valid_name(name):
            return "Workspace name must be a valid package name"
        if name in ctx.index.names():
            return "Workspace name must be unique within monorepo"
        folder = name.rsplit("/", 1)[-1]
        if ctx.store.exists(workspace_path(group, folder)):
            return "Workspace folder already exists"
        return True

    return validate


def choose_workspace_options(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Collect the new workspace's manifest fields into ``options``."""
    has_typescript = any(ctx.store.exists(f"{w.path}/tsconfig.json") for w in ctx.index)
    questions = chain(
        heading("Workspace"),
        ask("name", "Name", validate=workspace_name_validator(ctx, input["group"])),
        ask("description", "Description"),
        ask("main", "Main file", initial=default_main_file(has_typescript)),
        heading("Dependencies"),
        ask("deps", "Main"),
        ask("devs", "Dev"),
        heading("Scripts"),
        ask("dev", "Dev"),
        ask("build", "Build"),
        ask("test", "Test"),
    )
    outcome = questions(ctx, TaskInput(task=input.task))
    if not isinstance(outcome, Continue):
        return outcome
    options = {key: value for key, value in outcome.input.items() if key != "task"}
    return Continue(input.with_fields(options=options))


def confirm_add_workspace(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    outcome = confirm(ctx, input, "Add new workspace?")
    if not isinstance(outcome, Continue):
        return outcome
    return Chain(TaskName.ADD, {"group": input["group"]})


def confirm_remove_workspace(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    """Make the user type the workspace folder rather than answer yes / no."""
    workspace = ctx.index.get(input["workspace"])
    folder = workspace.folder if workspace else input["workspace"]

    def validate(answer: str) -> bool | str:
        if answer != folder:
            return f'Type "{folder}" to confirm removal'
        return True

    return prompt(
        ctx,
        input,
        "confirm",
        click.style("Type workspace folder name to confirm removal", fg="red"),
        validate=validate,
    )


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------


def script_choices(ctx: SpacemanContext) -> list[Choice]:
    """Every script of the root and of each workspace, labelled with its path."""

    def make(path: str, name: str) -> Choice:
        label = click.style(f"{path or '/'}: ", fg="bright_black") + name
        return Choice(label=label, value={"path": path, "name": name})

    choices = [make("", name) for name in ctx.store.scripts()]
    for workspace in ctx.index:
        choices.extend(make(workspace.path, name) for name in ctx.store.scripts(workspace.path))
    return choices


def choose_script(ctx: SpacemanContext, input: TaskInput) -> Outcome:  # noqa: A002
    return prompt(
        ctx,
        input,
        "script",
        "Script",
        type=PromptType.AUTOCOMPLETE,
        choices=script_choices(ctx),
        limit=ctx.settings.autocomplete_limit,
    )
