"""Resolve command-line targets to project directories or layout files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from autocil.errors import ValidationError
from autocil.helpers import first_session_name, try_parse
from autocil.logger import AutocilLogger

LAYOUT_SUFFIXES = (".yaml", ".yml")


@dataclass(frozen=True)
class TargetSpec:
    """One requested target.

    ``path`` may not exist when ``layout_file`` is set.
    """

    requested: str
    path: Path
    layout_file: Path | None = None


def is_path_like(requested: str) -> bool:
    """Paths contain a separator or start with ``.`` or ``~``; anything else is a bare name."""
    return "/" in requested or requested.startswith((".", "~")) or Path(requested).is_absolute()


def resolve_target(
    requested: str,
    projects_root: Path,
    cwd: Path,
    logger: AutocilLogger | None = None,
) -> TargetSpec:
    """
    Resolve one command-line argument.

    Path-like arguments resolve against ``cwd``. Bare names resolve to
    ``projects_root / name``, and ``projects_root / name.yaml`` (or ``.yml``)
    is picked up as a pre-existing layout. A usable layout wins over the
    directory; an unusable one is reported and the directory is used.

    Raises:
        ValidationError: The path does not exist, or a bare name matches
            neither a directory nor a usable layout file
    """
    if is_path_like(requested):
        path = (cwd / Path(requested).expanduser()).resolve()
        if not path.exists():
            raise ValidationError(f"'{requested}' does not exist ({path})")
        return TargetSpec(requested, path)

    path = (projects_root / requested).resolve()
    for suffix in LAYOUT_SUFFIXES:
        layout_file = projects_root / f"{requested}{suffix}"
        if not layout_file.is_file():
            continue
        target = TargetSpec(requested, path, layout_file.resolve())
        if load_layout_file(target, logger=logger) is not None:
            return target

    if not path.exists():
        raise ValidationError(
            f"'{requested}' is neither a directory nor a usable layout file under {projects_root}"
        )
    return TargetSpec(requested, path)


def resolve_targets(
    requested: tuple[str, ...] | list[str],
    projects_root: Path,
    cwd: Path,
    logger: AutocilLogger | None = None,
) -> list[TargetSpec]:
    """Resolve every argument; no arguments means the current directory.

    All arguments are resolved before any is used, so one bad target
    aborts the run before any session is touched.
    """
    if not requested:
        return [TargetSpec(".", cwd.resolve())]
    return [resolve_target(r, projects_root, cwd, logger=logger) for r in requested]


def load_layout_file(
    target: TargetSpec,
    explicit_name: str | None = None,
    logger: AutocilLogger | None = None,
) -> tuple[str, dict[str, Any]] | None:
    """
    Load a pre-existing layout document for a target.

    The session name comes from ``explicit_name``, else the document's own
    ``name``, else the requested name; it is sanitized and written back into
    the document so teamocil renames the session to the same handle.

    Returns:
        ``(session_name, document)``, or None when the file is unusable
    """
    if target.layout_file is None:
        return None

    data = try_parse(target.layout_file, yaml.safe_load, logger)
    if data is None:
        return None
    if not isinstance(data, dict) or not isinstance(data.get("windows"), list):
        (logger or AutocilLogger()).warning(
            f"Ignoring malformed {target.layout_file.name}: expected a mapping with a 'windows' list"
        )
        return None

    name = explicit_name or data.get("name") or target.requested
    session_name = first_session_name(str(name), target.requested)
    document = dict(data)
    document["name"] = session_name
    return session_name, document
