"""Data models for spaceman."""

from spaceman.models.choice import Choice, ChoiceGroup, flatten_choices, make_choices_group
from spaceman.models.enums import PackageManager, PackageTask, PromptType, TaskName
from spaceman.models.manifest import Manifest
from spaceman.models.task import Cancelled, Chain, Continue, Outcome, TaskInput
from spaceman.models.workspace import ROOT_GROUP, Workspace

__all__ = [
    "ROOT_GROUP",
    # Tasks
    "Cancelled",
    "Chain",
    # Choices
    "Choice",
    "ChoiceGroup",
    "Continue",
    # Manifest
    "Manifest",
    "Outcome",
    # Enums
    "PackageManager",
    "PackageTask",
    "PromptType",
    "TaskInput",
    "TaskName",
    # Workspace
    "Workspace",
    "flatten_choices",
    "make_choices_group",
]
