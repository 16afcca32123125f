"""Shared enumerations."""

from __future__ import annotations

from enum import StrEnum

# -- Package manager ---------------------------------------------------------


class PackageManager(StrEnum):
    """Package manager driving the monorepo, detected from lock files."""

    YARN = "yarn"
    PNPM = "pnpm"
    NPM = "npm"


class PackageTask(StrEnum):
    """Dependency operations understood by every package manager."""

    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPDATE = "update"


# -- Tasks -------------------------------------------------------------------


class TaskName(StrEnum):
    """Interactive tasks offered by the task chooser."""

    RUN = "run"
    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPDATE = "update"
    RESET = "reset"
    SHARE = "share"
    GROUP = "group"
    ADD = "add"
    REMOVE = "remove"


# -- Prompts -----------------------------------------------------------------


class PromptType(StrEnum):
    """Prompt flavours supported by the prompter."""

    INPUT = "input"
    SELECT = "select"
    MULTISELECT = "multiselect"
    AUTOCOMPLETE = "autocomplete"
