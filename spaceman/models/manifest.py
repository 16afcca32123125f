"""Manifest (``package.json``) data model.

The typed view is read-only: actions mutate the raw JSON object returned by
the store so that unknown keys and the author's key order survive a rewrite.

Fields the tool does not own are accepted in whatever shape the author used
(yarn's ``"workspaces": {"nohoist": [...]}``, ``"dependencies": null``); a
map that is not an object reads as empty.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Manifest(BaseModel):
    """The subset of ``package.json`` the tool reads."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str | None = None
    workspaces: Any = None
    dependencies: dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: dict[str, Any] = Field(default_factory=dict, alias="devDependencies")
    scripts: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_none(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("dependencies", "dev_dependencies", "scripts", mode="before")
    @classmethod
    def _object_or_empty(cls, value: Any) -> dict:
        return value if isinstance(value, dict) else {}

    @property
    def dependency_names(self) -> list[str]:
        """Keys of ``dependencies`` then ``devDependencies``, in declaration order."""
        return [*self.dependencies, *self.dev_dependencies]

    @property
    def script_names(self) -> list[str]:
        return list(self.scripts)
