"""
core/json_file.py
-----------------
Whole-file JSON persistence shared by the position store and the topic
directory. Files are replaced atomically: a reader never sees half a file.
"""

import json
import logging
import os
import tempfile

from core.errors import PersistenceError, StoreCorrupted

logger = logging.getLogger("json_file")


# ============================================================
# 📖 Read
# ============================================================

def read_json(path: str, default=None):
    """
    Returns the parsed content of `path`, or `default` when the file is missing.
    Raises StoreCorrupted when the file exists but is not valid JSON.
    """
    if not os.path.exists(path):
        logger.info(f"📭 {path} not found, starting empty.")
        return default

    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as e:
        raise StoreCorrupted(f"{path} is not valid JSON: {e}") from e
    except OSError as e:
        raise StoreCorrupted(f"{path} could not be read: {e}") from e


# ============================================================
# 💾 Write
# ============================================================

def write_json(path: str, data) -> None:
    """Serializes `data` (2-space indent) and atomically replaces `path`."""
    directory = os.path.dirname(os.path.abspath(path))

    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
    except OSError as e:
        logger.error(f"❌ Could not write {path}: {e}")
        raise PersistenceError(f"Could not save data to disk: {e}") from e
