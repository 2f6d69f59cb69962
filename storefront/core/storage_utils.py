# storefront/core/storage_utils.py
import contextlib
import os
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace `path` with `text` so readers never see a partial file.

    The content goes to a temp file in the same directory (same
    filesystem, so the rename is atomic), is fsync'd, then renamed over
    the target with os.replace. A crash mid-write leaves the previous
    version in place.

    Raises:
        OSError: if the directory cannot be created or any step fails.
                 The temp file is removed before re-raising.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.remove(tmp_path)
        raise


def read_text(path: Path) -> str | None:
    """
    Return the file content, or None if the file does not exist.

    Any other OSError (permissions, I/O) is raised to the caller.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
