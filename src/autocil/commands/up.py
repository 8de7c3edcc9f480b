"""autocil up command - Start tmux sessions for project directories."""

from pathlib import Path

import click


@click.command()
@click.argument("targets", nargs=-1)
@click.option(
    "--name",
    "-n",
    default=None,
    help="Session name to use instead of the project name. Single target only.",
)
@click.option(
    "--attach/--no-attach",
    default=True,
    help="Attach to the (last) session after creation.",
)
@click.option(
    "--log-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Also append JSON log lines to this directory.",
)
def up(targets: tuple[str, ...], name: str | None, attach: bool, log_dir: Path | None) -> None:
    """Generate a teamocil layout for each TARGET and start it in tmux.

    TARGET is a project directory, or a bare project name looked up under
    the configured projects_root. Without TARGET the current directory is
    used. With several targets, sessions are created in order and only the
    last one is attached.

    Exit codes:
      0 - Success
      1 - A target failed
      2 - Invalid arguments or unknown target
      3 - Environment not ready (inside tmux, teamocil missing)

    Examples:

      autocil up

      autocil up ~/code/api ~/code/web

      autocil up my-app --name work --no-attach
    """
    from autocil.commands._up_impl import run_up

    run_up(targets=targets, name=name, attach=attach, log_dir=log_dir)
