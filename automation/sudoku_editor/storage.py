"""Atomic writes for exported grid pages.

All writes go to a temporary file first, then are renamed into place
so a crash mid-write never leaves a half-written export behind.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

DEFAULT_EXPORT_PATH = Path("sudoku.html")


def write_text(text: str, path: str | Path | None = None) -> Path:
    """Atomically write *text* to *path*.  Creates parent dirs if needed."""
    p = Path(path or DEFAULT_EXPORT_PATH).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp = tempfile.mkstemp(dir=p.parent, suffix=".tmp", prefix=".sudoku_")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        # os.replace() is atomic on the same filesystem.
        os.replace(tmp, p)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise

    return p
