"""
autocil log output

Console: text lines on stderr (human readable, never mixed into layout output)
File: JSON lines, only when a log directory is configured
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import click

_LEVEL_COLORS = {
    "WARNING": "yellow",
    "ERROR": "red",
}


class AutocilLogger:
    """
    Logger used for warnings about degraded probes and per-target progress.

    Console: ``[LEVEL] message`` on stderr
    File: one JSON object per line in ``autocil-YYYYMMDD.log``
    """

    def __init__(self, log_dir: Path | None = None, verbose: bool = False) -> None:
        """
        Args:
            log_dir: Directory for JSON log files (None disables file output)
            verbose: Echo DEBUG messages to the console as well
        """
        self.log_dir = log_dir
        self.verbose = verbose
        self.warnings: list[str] = []
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def _get_log_file(self) -> Path | None:
        if self.log_dir is None:
            return None
        today = datetime.now().strftime("%Y%m%d")
        return self.log_dir / f"autocil-{today}.log"

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        """
        Emit a log record.

        Args:
            level: DEBUG, INFO, WARNING or ERROR
            message: Log message
            **kwargs: Extra structured data for the JSON log
        """
        if level == "WARNING":
            self.warnings.append(message)

        if level != "DEBUG" or self.verbose:
            line = f"[{level}] {message}"
            color = _LEVEL_COLORS.get(level)
            click.echo(click.style(line, fg=color) if color else line, err=True)

        log_file = self._get_log_file()
        if log_file is None:
            return
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "message": message,
            **kwargs,
        }
        with open(log_file, "a") as f:
            f.write(json.dumps(log_entry, default=str) + "\n")

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, **kwargs)
