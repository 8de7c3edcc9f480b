"""autocil show command - Print the generated layout."""

import click


@click.command()
@click.argument("target", required=False)
@click.option(
    "--name",
    "-n",
    default=None,
    help="Session name to use instead of the project name.",
)
def show(target: str | None, name: str | None) -> None:
    """Print the teamocil layout generated for TARGET without starting tmux."""
    from autocil.commands._up_impl import run_show

    run_show(target=target, name=name)
