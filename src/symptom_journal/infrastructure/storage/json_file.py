"""
JSON file helpers for the entry store.

Writes go through a temporary sibling file that is fsynced and then
renamed over the target, so a crash mid-write leaves the previous file
intact.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from symptom_journal.utils.exceptions import StorageError

logger = logging.getLogger(__name__)


def write_json_atomic(path: Path, data: Any, file_mode: int | None = 0o600) -> None:
    """
    Serialize data to path atomically.

    Args:
        path: Target file.
        data: JSON-compatible value.
        file_mode: Permission bits applied after the write (best effort).

    Raises:
        StorageError: If the file cannot be written.
    """
    tmp = path.with_name(path.name + ".tmp")
    payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as e:
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            logger.debug(f"Could not remove temporary file {tmp}")
        raise StorageError(f"Failed to write {path}: {e}") from e

    if file_mode is not None:
        try:
            os.chmod(path, file_mode)
        except OSError:
            logger.debug(f"Could not set permissions on {path}")


def read_text(path: Path) -> str:
    """
    Read a UTF-8 text file.

    Raises:
        StorageError: If the file cannot be read or decoded.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Failed to read {path}: {e}") from e
