from typing import NoReturn

import click

from spaceman.models.enums import TaskName


@click.command()
@click.argument("task", required=False, type=click.Choice([task.value for task in TaskName]))
@click.option("--root", default=None, help="Monorepo root (default: from SPACEMAN_ROOT or the current folder).")
@click.option("--log-level", default=None, help="Log level (default: from SPACEMAN_LOG_LEVEL or WARNING).")
def main(task: str | None, root: str | None, log_level: str | None) -> None:
    """Spaceman - manage the workspaces of a JavaScript monorepo.

    Without TASK, shows the task chooser.
    """
    from spaceman.context import create_context
    from spaceman.index import ConfigurationError
    from spaceman.log import setup_logging
    from spaceman.settings import get_settings
    from spaceman.shell import CommandFailedError
    from spaceman.tasks import UnknownTaskError, run_task
    from spaceman.tasks.steps import choose_task

    settings = get_settings()
    if root is not None:
        settings = settings.model_copy(update={"root": root})
    setup_logging(log_level or settings.log_level)

    click.echo()
    try:
        ctx = create_context(settings)
    except ConfigurationError as exc:
        _exit(str(exc))

    task = task or choose_task(ctx)
    if task is None:
        _exit()

    try:
        run_task(ctx, task)
    except UnknownTaskError as exc:
        _exit(str(exc))
    except CommandFailedError as exc:
        # The child's exit status is not propagated.
        _exit(exc.stderr.rstrip())
    _exit()


def _exit(message: str = "") -> NoReturn:
    if message:
        click.echo(message)
    click.echo()
    raise SystemExit(0)


if __name__ == "__main__":
    main()
