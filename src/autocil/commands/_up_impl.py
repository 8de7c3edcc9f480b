"""Implementation of the autocil up and show commands."""

import subprocess
from pathlib import Path
from typing import Any, Optional, Union

import click

from autocil.composer import LayoutDocument, compose
from autocil.config import Config, load_config
from autocil.errors import (
    AutocilError,
    EnvironmentPreconditionError,
    TargetError,
    ValidationError,
)
from autocil.layout_writer import render_layout, write_layout
from autocil.logger import AutocilLogger
from autocil.profiler import profile
from autocil.targets import TargetSpec, load_layout_file, resolve_targets
from autocil.tmux import (
    attach_session,
    inside_tmux,
    kill_session,
    new_session,
    runner_available,
)


def build_layout(
    target: TargetSpec,
    name: Optional[str],
    config: Config,
    logger: AutocilLogger,
) -> tuple[str, Path, Union[LayoutDocument, dict[str, Any]]]:
    """Produce the layout for one target.

    A pre-existing layout file short-circuits profiling; otherwise the
    directory is profiled and composed.

    Returns:
        ``(session_name, root, document)``

    Raises:
        TargetError: The target directory is missing or not a directory.
    """
    loaded = load_layout_file(target, explicit_name=name, logger=logger)
    if loaded is not None:
        session_name, document = loaded
        root = target.path if target.path.is_dir() else target.layout_file.parent
        logger.debug(f"Using layout file {target.layout_file}", target=target.requested)
        return session_name, root, document

    project = profile(target.path, explicit_name=name, logger=logger)
    logger.debug(
        f"Profiled {project.display_name}",
        target=target.requested,
        package_manager=project.package_manager.value,
        ecosystem=project.ecosystem_kind.value,
    )
    return project.session_name, target.path, compose(project, target.path, editor=config.editor)


def run_up(
    targets: tuple[str, ...],
    name: Optional[str] = None,
    attach: bool = True,
    log_dir: Optional[Path] = None,
) -> None:
    """Run the up command implementation.

    Targets are processed one after another; only the last one is attached
    because attaching blocks until the user detaches.

    Args:
        targets: Directories or bare project names (empty means the cwd).
        name: Session name override (single target only).
        attach: Whether to attach to the last session after creation.
        log_dir: Directory for JSON log files.
    """
    logger = AutocilLogger(log_dir=log_dir)

    if name and len(targets) > 1:
        raise ValidationError("--name can only be used with a single target")

    # Check prerequisites
    if attach and inside_tmux():
        raise EnvironmentPreconditionError(
            "Already inside a tmux session; detach first or use --no-attach"
        )
    if not runner_available():
        raise EnvironmentPreconditionError("teamocil is not installed or not in PATH")

    config = load_config(logger=logger)
    specs = resolve_targets(targets, config.projects_root, Path.cwd(), logger=logger)

    sessions = []
    failures = 0
    for target in specs:
        try:
            session = _launch(target, name, config, logger)
        except TargetError as e:
            click.echo(click.style(f"Error: {e.format_message()}", fg="red"), err=True)
            failures += 1
            continue
        sessions.append(session)

    if failures:
        if sessions:
            click.echo("Sessions started:")
            for session in sessions:
                click.echo(f"  tmux attach -t {session}")
        raise AutocilError(f"{failures} of {len(specs)} target(s) failed")

    if attach:
        click.echo(f"Attaching to {sessions[-1]}...")
        attach_session(sessions[-1])
    else:
        for session in sessions:
            click.echo(f"  tmux attach -t {session}")


def _launch(
    target: TargetSpec,
    name: Optional[str],
    config: Config,
    logger: AutocilLogger,
) -> str:
    """Generate, persist and start the session for one target."""
    session, root, document = build_layout(target, name, config, logger)
    layout_path = write_layout(document, session)
    logger.info(f"Layout for {target.requested} written to {layout_path}", session=session)

    click.echo(f"Launching session '{session}'...")
    kill_session(session)
    try:
        new_session(session, root, layout_path)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise TargetError(f"Failed to create tmux session '{session}': {detail}") from e

    click.echo(click.style(f"Session '{session}' started!", fg="green"))
    return session


def run_show(target: Optional[str], name: Optional[str] = None) -> None:
    """Print the layout that ``up`` would generate for one target."""
    logger = AutocilLogger()
    config = load_config(logger=logger)
    spec = resolve_targets(
        (target,) if target else (), config.projects_root, Path.cwd(), logger=logger
    )[0]
    _, _, document = build_layout(spec, name, config, logger)
    click.echo(render_layout(document), nl=False)
