"""tmux and teamocil process helpers."""

import os
import shutil
import subprocess
import time
from pathlib import Path

RUNNER = "teamocil"

# Seconds to wait before attaching so the new session is ready
ATTACH_DELAY = 0.5


def runner_available() -> bool:
    """Check if teamocil is available."""
    return shutil.which(RUNNER) is not None


def inside_tmux() -> bool:
    """Check if we are running inside a tmux client."""
    return bool(os.environ.get("TMUX"))


def runner_command(layout_path: Path) -> str:
    """Shell line that lets teamocil build the session from a layout file."""
    return f"{RUNNER} --layout {layout_path}"


def kill_session(session: str) -> None:
    """Kill an existing session; a missing session is not an error."""
    subprocess.run(
        ["tmux", "kill-session", "-t", session],
        capture_output=True,
    )


def new_session(session: str, root: Path, layout_path: Path) -> None:
    """Create a detached session running teamocil against the layout."""
    subprocess.run(
        [
            "tmux", "new-session",
            "-d",
            "-s", session,
            "-c", str(root),
            runner_command(layout_path),
        ],
        check=True,
        capture_output=True,
        text=True,
    )


def attach_session(session: str) -> None:
    """Attach to a session, replacing the current process."""
    time.sleep(ATTACH_DELAY)
    os.execvp("tmux", ["tmux", "attach-session", "-t", session])
