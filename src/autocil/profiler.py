"""
Project profiler

Inspects a project directory and reports what its development workflow looks
like: which package manager it uses, which scripts run continuously, whether
it has a dev server, Docker Compose services, a database studio, or a
project-local list of commands that replaces all of the above.

Probes (run in this order, each one best-effort):
1. package.json (name, scripts)
2. pyproject.toml ([tool.autocil.scripts])
3. Lockfiles (pnpm-lock.yaml, yarn.lock, package-lock.json)
4. docker-compose.{yml,yaml,json} and Dockerfile
5. .autocil.yaml (override commands)
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from autocil.errors import TargetError
from autocil.helpers import first_session_name, try_parse
from autocil.logger import AutocilLogger

MANIFEST_FILE = "package.json"
BUILD_FILE = "pyproject.toml"
OVERRIDE_FILE = ".autocil.yaml"
DOCKERFILE = "Dockerfile"
DOCKER_COMPOSE_FILES = (
    "docker-compose.yml",
    "docker-compose.yaml",
    "docker-compose.json",
)

WATCH_SUFFIX = ":watch"
DEV_TASK = "dev"
TEST_WATCH_TASK = "test:watch"
TYPES_WATCH_TASK = "types:watch"
DB_STUDIO_TASK = "db:studio"


class PackageManager(Enum):
    """JavaScript package managers, each identified by its lockfile."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"

    def run_command(self, script: str) -> str:
        """Shell line running a manifest script through this manager."""
        return f"{_RUN_PREFIX[self]} {script}"


_RUN_PREFIX = {
    PackageManager.NPM: "npm run",
    PackageManager.YARN: "yarn",
    PackageManager.PNPM: "pnpm run",
}

# Checked in order; the first lockfile found wins
LOCKFILES = (
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
    ("package-lock.json", PackageManager.NPM),
)
DEFAULT_PACKAGE_MANAGER = PackageManager.PNPM


class EcosystemKind(Enum):
    """Which project file supplied task information."""

    GENERIC_MANIFEST = "generic_manifest"
    DECLARATIVE_BUILD_FILE = "declarative_build_file"
    NONE = "none"


@dataclass(frozen=True)
class WatchTask:
    """A named project task.

    ``command`` is the script body for manifest tasks (which run through the
    package manager) and the literal shell line for build-file tasks.
    """

    name: str
    command: str
    ecosystem: EcosystemKind = EcosystemKind.GENERIC_MANIFEST

    def invocation(self, package_manager: PackageManager) -> str:
        if self.ecosystem == EcosystemKind.DECLARATIVE_BUILD_FILE:
            return self.command
        return package_manager.run_command(self.name)


@dataclass(frozen=True)
class ProjectProfile:
    """Everything the composer needs to know about one project."""

    session_name: str
    display_name: str
    package_manager: PackageManager = DEFAULT_PACKAGE_MANAGER
    ecosystem_kind: EcosystemKind = EcosystemKind.NONE
    dev_task: WatchTask | None = None
    watch_tasks: tuple[WatchTask, ...] = ()
    db_studio_task_present: bool = False
    docker_compose_present: bool = False
    dockerfile_present: bool = False
    override_commands: tuple[str, ...] = ()

    @property
    def dev_task_present(self) -> bool:
        return self.dev_task is not None

    def watch_task(self, name: str) -> WatchTask | None:
        """Look up a watch task by name."""
        for task in self.watch_tasks:
            if task.name == name:
                return task
        return None


@dataclass
class _Probe:
    """Mutable accumulator filled by the individual probes."""

    session_name: str
    display_name: str
    ecosystem_kind: EcosystemKind = EcosystemKind.NONE
    dev_task: WatchTask | None = None
    watch_tasks: list[WatchTask] = field(default_factory=list)
    db_studio_task_present: bool = False

    def add_watch_task(self, task: WatchTask) -> None:
        if all(existing.name != task.name for existing in self.watch_tasks):
            self.watch_tasks.append(task)


def profile(
    directory: Path,
    explicit_name: str | None = None,
    logger: AutocilLogger | None = None,
) -> ProjectProfile:
    """
    Build the profile of a project directory.

    Reads files under ``directory`` only; never writes.

    Args:
        directory: Project directory
        explicit_name: Session name requested on the command line
        logger: Logger for warnings about malformed files

    Returns:
        The project profile

    Raises:
        TargetError: ``directory`` does not exist or is not a directory
    """
    if not directory.exists():
        raise TargetError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise TargetError(f"Not a directory: {directory}")

    name = explicit_name or directory.name
    probe = _Probe(
        session_name=first_session_name(name, directory.name),
        display_name=name,
    )

    _probe_manifest(directory, probe, use_manifest_name=explicit_name is None, logger=logger)
    _probe_build_file(directory, probe, logger=logger)

    return ProjectProfile(
        session_name=probe.session_name,
        display_name=probe.display_name,
        package_manager=detect_package_manager(directory),
        ecosystem_kind=probe.ecosystem_kind,
        dev_task=probe.dev_task,
        watch_tasks=tuple(probe.watch_tasks),
        db_studio_task_present=probe.db_studio_task_present,
        docker_compose_present=has_docker_compose(directory),
        dockerfile_present=(directory / DOCKERFILE).is_file(),
        override_commands=load_override_commands(directory, logger=logger),
    )


def _probe_manifest(
    directory: Path,
    probe: _Probe,
    use_manifest_name: bool,
    logger: AutocilLogger | None,
) -> None:
    manifest = try_parse(directory / MANIFEST_FILE, json.loads, logger)
    if not isinstance(manifest, dict):
        return

    probe.ecosystem_kind = EcosystemKind.GENERIC_MANIFEST

    manifest_name = manifest.get("name")
    if use_manifest_name and isinstance(manifest_name, str) and manifest_name:
        probe.display_name = manifest_name
        probe.session_name = first_session_name(manifest_name, probe.session_name)

    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        return

    for script_name, body in scripts.items():
        if not isinstance(body, str) or not body:
            continue
        task = WatchTask(script_name, body, EcosystemKind.GENERIC_MANIFEST)
        if script_name == DEV_TASK:
            probe.dev_task = task
        elif script_name == DB_STUDIO_TASK:
            probe.db_studio_task_present = True
        if script_name.endswith(WATCH_SUFFIX):
            probe.add_watch_task(task)


def _probe_build_file(
    directory: Path,
    probe: _Probe,
    logger: AutocilLogger | None,
) -> None:
    build_config = try_parse(directory / BUILD_FILE, tomllib.loads, logger)
    if build_config is None:
        return

    probe.ecosystem_kind = EcosystemKind.DECLARATIVE_BUILD_FILE

    scripts = _tool_scripts(build_config)
    for script_name, command in scripts.items():
        if not isinstance(command, str) or not command:
            continue
        task = WatchTask(script_name, command, EcosystemKind.DECLARATIVE_BUILD_FILE)
        if script_name == DEV_TASK and probe.dev_task is None:
            probe.dev_task = task
        if script_name.endswith(WATCH_SUFFIX):
            probe.add_watch_task(task)


def _tool_scripts(build_config: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.autocil.scripts]`` table, or an empty one."""
    table: Any = build_config
    for key in ("tool", "autocil", "scripts"):
        if not isinstance(table, dict):
            return {}
        table = table.get(key, {})
    return table if isinstance(table, dict) else {}


def detect_package_manager(directory: Path) -> PackageManager:
    """Pick the package manager from the lockfile present, or the default."""
    for lockfile, manager in LOCKFILES:
        if (directory / lockfile).is_file():
            return manager
    return DEFAULT_PACKAGE_MANAGER


def has_docker_compose(directory: Path) -> bool:
    """Check for any recognized Docker Compose manifest."""
    return any((directory / name).is_file() for name in DOCKER_COMPOSE_FILES)


def load_override_commands(
    directory: Path,
    logger: AutocilLogger | None = None,
) -> tuple[str, ...]:
    """
    Read the project-local override command list.

    Accepts either a YAML list of command strings or a mapping with a
    ``commands`` list. Any other shape is reported and treated as absent.

    Args:
        directory: Project directory
        logger: Logger for warnings

    Returns:
        The commands in file order (empty when there is no usable file)
    """
    path = directory / OVERRIDE_FILE
    data = try_parse(path, yaml.safe_load, logger)
    if data is None:
        return ()

    commands = data.get("commands") if isinstance(data, dict) else data
    if isinstance(commands, list) and all(isinstance(c, str) for c in commands):
        return tuple(commands)

    (logger or AutocilLogger()).warning(
        f"Ignoring malformed {OVERRIDE_FILE}: expected a list of commands or a 'commands' list",
        path=str(path),
    )
    return ()
