"""Serialize layout documents and persist them for teamocil."""

from __future__ import annotations

import random
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from autocil.composer import LayoutDocument

LayoutLike = Union[LayoutDocument, Mapping[str, Any]]


def render_layout(document: LayoutLike) -> str:
    """Render a layout document as teamocil YAML.

    Args:
        document: A composed LayoutDocument or a raw layout mapping
            (as loaded from a pre-existing layout file)

    Returns:
        YAML text with a leading comment naming the session
    """
    data = document.to_dict() if isinstance(document, LayoutDocument) else dict(document)
    body = yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    return f"# Teamocil configuration for {data.get('name', '')}\n{body}"


def layout_filename(session_name: str, now: Optional[datetime] = None) -> str:
    """Unique file name: session, ISO timestamp and a random suffix."""
    if now is None:
        now = datetime.now(timezone.utc)
    timestamp = now.isoformat().replace(":", "-").replace(".", "-")
    suffix = random.randint(0, 9999)
    return f"{session_name}_{timestamp}_{suffix}.yml"


def write_layout(
    document: LayoutLike,
    session_name: str,
    directory: Optional[Path] = None,
) -> Path:
    """Write a rendered layout to a uniquely named temporary file.

    Args:
        document: Layout to write
        session_name: Session name embedded in the file name
        directory: Target directory (defaults to the system temp dir)

    Returns:
        Path to the written file
    """
    if directory is None:
        directory = Path(tempfile.gettempdir())
    path = directory / layout_filename(session_name)
    path.write_text(render_layout(document), encoding="utf-8")
    return path
