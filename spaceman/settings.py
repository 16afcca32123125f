"""Tool configuration loaded from SPACEMAN_* environment variables.

A repository can also carry its own overrides in the root ``package.json``
under a ``spaceman`` key, for example::

    {
      "name": "my-monorepo",
      "workspaces": ["apps/*", "packages/*"],
      "spaceman": {
        "reset_paths": [".turbo", "dist", "node_modules"]
      }
    }

Manifest values win over environment values.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from spaceman.index import ConfigurationError

DEFAULT_RESET_PATHS = [
    ".turbo",
    "node_modules",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
]

MANIFEST_SETTINGS_KEY = "spaceman"


class InvalidManifestSettingsError(ConfigurationError):
    """The root manifest's ``spaceman`` block does not validate."""

    def __init__(self, error: ValidationError) -> None:
        problems = "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in error.errors())
        super().__init__(f'Invalid "{MANIFEST_SETTINGS_KEY}" settings in package.json: {problems}')


class SpacemanSettings(BaseSettings):
    """Spaceman settings.

    All fields are read from environment variables with the ``SPACEMAN_``
    prefix.  For example, ``SPACEMAN_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPACEMAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    # -- Repository ------------------------------------------------------------
    root: str = "."
    """Monorepo root, the directory holding the root ``package.json``."""

    # -- Tasks -----------------------------------------------------------------
    reset_paths: list[str] = list(DEFAULT_RESET_PATHS)
    """Paths removed from every workspace and from the root by ``reset``."""

    autocomplete_limit: int = 10
    """Number of matches listed by the script chooser."""


def get_setting(manifest: dict | None, setting: str = "", default: Any = None) -> Any:
    """Read a dotted key from the manifest's ``spaceman`` block.

    ``get_setting(data, "reset_paths")`` returns the list under
    ``data["spaceman"]["reset_paths"]``; missing keys return *default*.
    An empty *setting* returns the whole block.
    """
    value: Any = (manifest or {}).get(MANIFEST_SETTINGS_KEY) or {}
    for key in filter(None, setting.split(".")):
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return value


def apply_manifest_settings(settings: SpacemanSettings, manifest: dict | None) -> SpacemanSettings:
    """Return a copy of *settings* with the manifest's overrides applied."""
    block = get_setting(manifest)
    if not isinstance(block, dict):
        return settings
    overrides = {key: block[key] for key in ("reset_paths", "autocomplete_limit") if key in block}
    if not overrides:
        return settings
    # Init kwargs take priority over env vars and .env.
    try:
        return SpacemanSettings(**{**settings.model_dump(), **overrides})
    except ValidationError as exc:
        raise InvalidManifestSettingsError(exc) from exc


@lru_cache(maxsize=1)
def get_settings() -> SpacemanSettings:
    """Return a cached settings instance.

    Call ``get_settings.cache_clear()`` in tests to force a re-read after
    overriding env vars.
    """
    return SpacemanSettings()
