"""External command execution.

Commands are echoed before they run (``» yarn install``) and executed
synchronously through the system shell.  There is no timeout: the tool waits
for the package manager to finish.  Output streams straight to the terminal
unless *silent* is set; stderr is always captured so that it can be shown
when the command fails.
"""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import click
from loguru import logger


class CommandFailedError(RuntimeError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed with exit status {returncode}: {command}")


@dataclass
class CommandResult:
    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@runtime_checkable
class Shell(Protocol):
    """Protocol for running external commands."""

    def run(self, command: str, *, cwd: str | Path | None = None, silent: bool = False) -> CommandResult:
        """Run *command* and return its result, whatever the exit status."""
        ...

    def check(self, command: str, *, cwd: str | Path | None = None, silent: bool = False) -> CommandResult:
        """Run *command*.  Raises ``CommandFailedError`` on non-zero exit."""
        ...


def echo_command(command: str) -> None:
    click.echo(click.style("» ", fg="bright_black") + click.style(command, fg="red"))


class SubprocessShell:
    """Shell implementation backed by ``subprocess.run``."""

    def __init__(self, cwd: str | Path = ".") -> None:
        self.cwd = Path(cwd)

    def run(self, command: str, *, cwd: str | Path | None = None, silent: bool = False) -> CommandResult:
        echo_command(command)
        workdir = Path(cwd) if cwd is not None else self.cwd
        logger.debug("Shell: running {!r} in {}", command, workdir)
        completed = subprocess.run(  # noqa: S602
            command,
            shell=True,
            cwd=workdir,
            text=True,
            stdout=subprocess.PIPE if silent else None,
            stderr=subprocess.PIPE,
            check=False,
        )
        stderr = completed.stderr or ""
        if stderr and not silent and completed.returncode == 0:
            # Warnings from the package manager are still worth seeing.
            sys.stderr.write(stderr)
        logger.debug("Shell: {!r} exited with {}", command, completed.returncode)
        return CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=stderr,
        )

    def check(self, command: str, *, cwd: str | Path | None = None, silent: bool = False) -> CommandResult:
        result = self.run(command, cwd=cwd, silent=silent)
        if not result.ok:
            raise CommandFailedError(command, result.returncode, result.stderr)
        return result
