from __future__ import annotations

import os
import tempfile
from pathlib import Path

from skyreport import logger
from skyreport.errors import StorageError


def atomic_write_bytes(destination: Path, payload: bytes) -> None:
    """Replace *destination* with *payload* so readers never see a partial file.

    The bytes go to a temporary sibling which is fsynced and then renamed over
    the destination. On any failure the temporary file is removed and the old
    destination is left untouched.
    """
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent)
    except OSError as exc:
        msg = f"failed to write {destination}: {exc}"
        raise StorageError(msg) from exc
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        tmp_path.replace(destination)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        msg = f"failed to write {destination}: {exc}"
        raise StorageError(msg) from exc
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("wrote %d bytes to %s", len(payload), destination)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"failed to read {path}: {exc}"
        raise StorageError(msg) from exc


__all__ = ["atomic_write_bytes", "read_text"]
