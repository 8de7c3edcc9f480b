"""
src/autocil/helpers.py - helper functions

Best-effort file parsing and tmux session-name sanitizing.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, TypeVar

import yaml

from autocil.logger import AutocilLogger

T = TypeVar("T")

# Errors a parser may raise for malformed input. json.JSONDecodeError and
# tomllib.TOMLDecodeError are both ValueError subclasses.
_PARSE_ERRORS = (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError)


def try_parse(
    path: Path,
    parser: Callable[[str], T],
    logger: AutocilLogger | None = None,
) -> T | None:
    """
    Read a UTF-8 file and parse it, degrading to None on failure.

    A missing file returns None silently; an unreadable or malformed one
    logs a single warning and returns None.

    Args:
        path: File to read
        parser: Callable turning the file text into a value
        logger: Logger receiving the warning (a console logger if omitted)

    Returns:
        The parsed value, or None
    """
    if not path.is_file():
        return None
    try:
        return parser(path.read_text(encoding="utf-8"))
    except _PARSE_ERRORS as e:
        (logger or AutocilLogger()).warning(
            f"Ignoring malformed {path.name}: {_first_line(e)}", path=str(path)
        )
        return None


def _first_line(error: Exception) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__


def sanitize_session_name(name: str) -> str:
    """
    Turn a project name into a tmux session handle.

    ``@``, ``/``, ``.`` and ``:`` become hyphens and a single leading hyphen
    is dropped, so ``@scope/name`` becomes ``scope-name``.

    Args:
        name: Raw project name (directory name or manifest name)

    Returns:
        A name safe for ``tmux -t``
    """
    sanitized = re.sub(r"[@/.:]", "-", name)
    if sanitized.startswith("-"):
        sanitized = sanitized[1:]
    return sanitized


DEFAULT_SESSION_NAME = "autocil"


def first_session_name(*candidates: str) -> str:
    """
    Sanitize candidates in order and return the first non-empty result.

    Falls back to ``DEFAULT_SESSION_NAME`` when every candidate sanitizes
    to an empty string (e.g. ``@``).
    """
    for candidate in candidates:
        sanitized = sanitize_session_name(candidate)
        if sanitized:
            return sanitized
    return DEFAULT_SESSION_NAME
