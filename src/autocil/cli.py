"""autocil CLI - tmux sessions generated from project directories."""

import click

from autocil import __version__
from autocil.commands.show import show
from autocil.commands.up import up


@click.group()
@click.version_option(version=__version__, prog_name="autocil")
def cli() -> None:
    """autocil - tmux sessions generated from project directories.

    autocil looks at a project (package.json scripts, pyproject.toml,
    lockfiles, Docker Compose files, a .autocil.yaml command list) and
    builds a teamocil layout with an editor, the project's watchers, its
    dev server and its services.
    """
    pass


cli.add_command(up)
cli.add_command(show)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
