"""
Layout composer

Turns a ProjectProfile into a teamocil layout document.

Window "dev" (main-vertical):
  editor | test:watch | types:watch | other watchers | dev | listing (focus)
Window "services" (only with a Docker Compose file):
  compose down/up | db:studio
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from autocil.profiler import (
    DB_STUDIO_TASK,
    DEV_TASK,
    TEST_WATCH_TASK,
    TYPES_WATCH_TASK,
    ProjectProfile,
)

DEV_WINDOW = "dev"
SERVICES_WINDOW = "services"
DEV_LAYOUT = "main-vertical"

DEFAULT_EDITOR = "vim"
TEST_WATCH_DELAY = "sleep 2 && "
LISTING_COMMAND = "sleep 1 && ls -la"
DOCKER_LOG = "docker-output.log"


@dataclass(frozen=True)
class Pane:
    commands: tuple[str, ...]
    focus: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"commands": list(self.commands)}
        if self.focus:
            data["focus"] = True
        return data


@dataclass(frozen=True)
class Window:
    name: str
    root: str
    panes: tuple[Pane, ...]
    layout: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "root": self.root}
        if self.layout:
            data["layout"] = self.layout
        data["panes"] = [pane.to_dict() for pane in self.panes]
        return data


@dataclass(frozen=True)
class LayoutDocument:
    """A teamocil layout: a session name and its windows."""

    name: str
    windows: tuple[Window, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "windows": [window.to_dict() for window in self.windows],
        }

    def window(self, name: str) -> Window | None:
        for window in self.windows:
            if window.name == name:
                return window
        return None


def compose(
    profile: ProjectProfile,
    root_dir: Path,
    editor: str = DEFAULT_EDITOR,
) -> LayoutDocument:
    """
    Render a profile into a layout document.

    Pure: the same profile and root always give an equal document.

    Args:
        profile: Project profile
        root_dir: Directory every window starts in
        editor: Command for the first (editor) pane

    Returns:
        The layout document
    """
    root = str(root_dir.resolve())

    panes = [Pane((editor,))]
    if profile.override_commands:
        panes.extend(Pane((command,)) for command in profile.override_commands)
    else:
        panes.extend(_task_panes(profile))
    panes.append(Pane((LISTING_COMMAND,), focus=True))

    windows = [Window(DEV_WINDOW, root, tuple(panes), layout=DEV_LAYOUT)]
    if profile.docker_compose_present:
        windows.append(Window(SERVICES_WINDOW, root, tuple(_service_panes(profile))))

    return LayoutDocument(profile.session_name, tuple(windows))


def _task_panes(profile: ProjectProfile) -> list[Pane]:
    manager = profile.package_manager
    panes = []

    test_watch = profile.watch_task(TEST_WATCH_TASK)
    if test_watch:
        panes.append(Pane((TEST_WATCH_DELAY + test_watch.invocation(manager),)))

    types_watch = profile.watch_task(TYPES_WATCH_TASK)
    if types_watch:
        panes.append(Pane((types_watch.invocation(manager),)))

    emitted = {TEST_WATCH_TASK, TYPES_WATCH_TASK, DEV_TASK}
    for task in profile.watch_tasks:
        if task.name not in emitted:
            panes.append(Pane((task.invocation(manager),)))
            emitted.add(task.name)

    # dev last: its output is the noisiest, so watchers start first
    if profile.dev_task:
        panes.append(Pane((profile.dev_task.invocation(manager),)))

    return panes


def docker_compose_command(build: bool) -> str:
    """Restart the compose stack, teeing output to a log file."""
    up = "docker compose up --build" if build else "docker compose up"
    return (
        f"docker compose down 2>&1 | tee {DOCKER_LOG} ; "
        f"{up} 2>&1 | tee -a {DOCKER_LOG}"
    )


def _service_panes(profile: ProjectProfile) -> list[Pane]:
    panes = [Pane((docker_compose_command(build=profile.dockerfile_present),))]
    if profile.db_studio_task_present:
        panes.append(Pane((profile.package_manager.run_command(DB_STUDIO_TASK),)))
    return panes
