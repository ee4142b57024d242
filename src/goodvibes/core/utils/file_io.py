"""
File I/O utilities: atomic text writes.

All functions operate on explicit paths.
"""

from __future__ import annotations

import os
import tempfile

from loguru import logger


def atomic_write(filepath: str, content: str, encoding: str = "utf-8") -> None:
    """
    Replace a file's content in one step.

    Writes to a temporary file next to the target, flushes it to disk and
    renames it over the target, so a crash mid-write leaves either the old
    or the new content in place. Parent directories are created as needed.

    Raises:
        OSError: if the temporary file cannot be written or renamed. The
            temporary file is removed and the target is left untouched.
    """
    directory = os.path.dirname(filepath) or "."
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=directory,
        prefix=f".{os.path.basename(filepath)}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, filepath)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {tmp_path}: {e}")
        raise
