"""Shared test fixtures: a throwaway monorepo, a scripted prompter, a recording shell.

No package manager is ever run: ``RecordingShell`` only remembers the
commands it was asked to run.  ``ScriptedPrompter`` answers prompts from a
queue and applies ``validate`` / ``result`` the way the real prompter does,
so validation failures show up as re-asks.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from spaceman.context import SpacemanContext, create_context
from spaceman.models.choice import flatten_choices
from spaceman.models.enums import PromptType
from spaceman.prompts import PromptCancelled, require_selection, resolve_prompt_type
from spaceman.settings import SpacemanSettings, get_settings
from spaceman.shell import CommandFailedError, CommandResult

CANCEL = object()
"""Queue this to make the next prompt behave like Ctrl-C."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def write_manifest(root: Path, path: str, data: dict) -> Path:
    folder = root / path.strip("/") if path.strip("/") else root
    folder.mkdir(parents=True, exist_ok=True)
    target = folder / "package.json"
    target.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return target


def read_manifest(root: Path, path: str = "") -> dict:
    folder = root / path.strip("/") if path.strip("/") else root
    return json.loads((folder / "package.json").read_text(encoding="utf-8"))


@dataclass
class PromptCall:
    name: str
    message: str
    options: dict[str, Any]
    errors: list[str] = field(default_factory=list)


class ScriptedPrompter:
    """Prompter answering from a queue of canned answers."""

    def __init__(self, *answers: Any) -> None:
        self.answers = list(answers)
        self.calls: list[PromptCall] = []
        self.confirms: list[str] = []
        self.headings: list[str] = []

    def queue(self, *answers: Any) -> None:
        self.answers.extend(answers)

    def _next(self) -> Any:
        if not self.answers:
            msg = "ScriptedPrompter ran out of answers"
            raise AssertionError(msg)
        answer = self.answers.pop(0)
        if answer is CANCEL:
            raise PromptCancelled
        return answer

    def ask(self, name: str, message: str, **options: Any) -> Any:
        call = PromptCall(name, message, options)
        self.calls.append(call)
        validate = options.get("validate")
        if resolve_prompt_type(options.get("choices"), options.get("type")) == PromptType.MULTISELECT:
            validate = validate or require_selection
        while True:
            answer = self._next()
            if isinstance(answer, str):
                answer = answer.strip()
            verdict = validate(answer) if validate else True
            if verdict is True:
                break
            call.errors.append(verdict)
        result = options.get("result")
        return result(answer) if result else answer

    def confirm(self, message: str, *, initial: bool = True) -> bool:
        self.confirms.append(message)
        return bool(self._next())

    def heading(self, text: str) -> None:
        self.headings.append(text)

    # -- Introspection ---------------------------------------------------------

    def call(self, name: str) -> PromptCall:
        return next(c for c in self.calls if c.name == name)

    def labels(self, name: str) -> list[str]:
        return [c.label for c in flatten_choices(list(self.call(name).options.get("choices") or []))]


class RecordingShell:
    """Shell that records commands instead of running them."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.commands: list[str] = []
        self.calls: list[dict[str, Any]] = []

    def run(self, command: str, *, cwd: Any = None, silent: bool = False) -> CommandResult:
        self.commands.append(command)
        self.calls.append({"command": command, "cwd": cwd, "silent": silent})
        if self.fail_on is not None and self.fail_on in command:
            return CommandResult(command=command, returncode=1, stderr="ERR! boom")
        return CommandResult(command=command, returncode=0)

    def check(self, command: str, *, cwd: Any = None, silent: bool = False) -> CommandResult:
        result = self.run(command, cwd=cwd, silent=silent)
        if not result.ok:
            raise CommandFailedError(command, result.returncode, result.stderr)
        return result


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in ("SPACEMAN_LOG_LEVEL", "SPACEMAN_ROOT", "SPACEMAN_RESET_PATHS", "SPACEMAN_AUTOCOMPLETE_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A small npm monorepo::

    package.json            workspaces: ["apps/*", "packages/*", "tools"]
    apps/web                depends on @acme/core and react
    apps/docs               depends on @acme/core
    packages/core           name @acme/core, depends on lodash
    packages/utils          dev dependency on typescript
    tools                   root-level workspace
    """
    write_manifest(
        tmp_path,
        "",
        {
            "name": "acme",
            "private": True,
            "workspaces": ["apps/*", "packages/*", "tools"],
            "scripts": {"build": "turbo build", "lint": "eslint ."},
        },
    )
    write_manifest(
        tmp_path,
        "/apps/web",
        {
            "name": "web",
            "version": "1.0.0",
            "dependencies": {"react": "^18.0.0", "@acme/core": "*"},
            "scripts": {"dev": "next dev"},
        },
    )
    write_manifest(tmp_path, "/apps/docs", {"name": "docs", "dependencies": {"@acme/core": "*"}})
    write_manifest(
        tmp_path,
        "/packages/core",
        {"name": "@acme/core", "dependencies": {"lodash": "^4.17.21"}, "scripts": {"test": "vitest"}},
    )
    write_manifest(tmp_path, "/packages/utils", {"name": "utils", "devDependencies": {"typescript": "^5.0.0"}})
    write_manifest(tmp_path, "/tools", {"name": "tools"})
    return tmp_path


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def shell() -> RecordingShell:
    return RecordingShell()


@pytest.fixture
def ctx(repo: Path, prompter: ScriptedPrompter, shell: RecordingShell) -> SpacemanContext:
    return create_context(SpacemanSettings(root=str(repo)), prompter=prompter, shell=shell)
