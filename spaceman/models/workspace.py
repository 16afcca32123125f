"""Workspace data model.

A workspace is not a file of its own: it is derived from a directory that
matches one of the root manifest's ``workspaces`` entries and holds a
``package.json`` with a non-empty ``name``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ROOT_GROUP = "[root]"
"""Sentinel group for workspaces living directly at the repository root."""


class Workspace(BaseModel):
    """Workspace record built by the workspace index."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Package name, e.g. 'tools' or '@web/tools'")
    folder: str = Field(description="Last path segment, e.g. 'web'")
    group: str = Field(default="", description="Glob prefix it was found under, e.g. 'apps'; empty at root")
    path: str = Field(description="Root-relative path starting with '/', e.g. '/apps/web'")

    @property
    def relative_path(self) -> str:
        """Path without the leading slash, as written in ``workspaces``."""
        return self.path.lstrip("/")
