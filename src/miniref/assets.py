"""Note attachments.

Attachments live in a directory named after the note file with an
``.assets`` suffix::

    notes/
      zettel.md
      zettel.assets/
        diagram.png
        paper.pdf
"""

from __future__ import annotations

import logging
import mimetypes
import os
from pathlib import Path

from miniref.note import Asset

logger = logging.getLogger(__name__)

_DEFAULT_MIME = "application/octet-stream"


def assets_dir_for(note_path: Path) -> Path:
    return Path(note_path).with_suffix(".assets")


def scan_assets(note_path: Path) -> tuple[Asset, ...]:
    """Return the files found directly in the note's ``.assets`` directory."""
    assets_dir = assets_dir_for(note_path)
    if not assets_dir.is_dir():
        return ()

    assets: list[Asset] = []
    try:
        entries = sorted(os.scandir(assets_dir), key=lambda e: e.name)
    except OSError as exc:
        logger.warning("Cannot read %s: %s", assets_dir, exc)
        return ()
    for entry in entries:
        if entry.name.startswith(".") or not entry.is_file(follow_symlinks=False):
            continue
        mime, _ = mimetypes.guess_type(entry.name)
        assets.append(Asset(name=entry.name, path=Path(entry.path), mime_type=mime or _DEFAULT_MIME))
    return tuple(assets)
