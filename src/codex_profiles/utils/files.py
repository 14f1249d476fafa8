import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from ..domain.errors import ConfigParseError, InvalidArgumentError, StorageError

logger = logging.getLogger(__name__)


def atomic_write(path: Path, data: Union[str, bytes]) -> None:
    """
    write data to path so readers see either the old or the new content.

    the bytes go to a temporary file in the same directory, are fsynced,
    then renamed over the target. the temporary file is removed on failure.

    raises:
        StorageError: if the directory, temp file or rename fails
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Failed to create directory {path.parent}: {e}") from e

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=path.name + ".", suffix=".tmp", dir=str(path.parent)
        )
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            # mkstemp creates 0600; keep the permissions the target already had
            os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.remove(tmp_name)
        except OSError:
            pass
        raise StorageError(f"Failed to finalize {path}: {e}") from e

    logger.debug("wrote %d bytes to %s", len(data), path)


def read_text(path: Path) -> str:
    """
    read a UTF-8 file.

    raises:
        StorageError: if the file cannot be read
        ConfigParseError: if the content is not valid UTF-8
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigParseError(path, f"invalid UTF-8: {e}") from e
    except OSError as e:
        raise StorageError(f"Failed to read {path}: {e}") from e


def read_json_object(path: Path) -> Dict[str, Any]:
    """
    load a JSON object from path.

    a missing or blank file is an empty object.

    raises:
        ConfigParseError: if the content is not valid JSON
        InvalidArgumentError: if the JSON value is not an object
    """
    if not path.exists():
        return {}
    text = read_text(path)
    if not text.strip():
        return {}
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(path, f"invalid JSON: {e}") from e
    if not isinstance(value, dict):
        raise InvalidArgumentError(f"Invalid JSON in {path}: expected object")
    return value


def write_json_object(path: Path, obj: Dict[str, Any]) -> None:
    atomic_write(path, json.dumps(obj, indent=2, ensure_ascii=False) + "\n")
