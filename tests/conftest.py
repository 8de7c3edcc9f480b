"""Shared fixtures for autocil tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def make_project(tmp_path):
    """Create a project directory populated with the given files.

    Mapping values are written as JSON (package.json style), strings verbatim.
    """

    def _make(name: str = "my-app", files: dict | None = None) -> Path:
        project = tmp_path / name
        project.mkdir(parents=True)
        for filename, content in (files or {}).items():
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            (project / filename).write_text(content)
        return project

    return _make
