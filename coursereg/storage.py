"""
Persistent storage for the whole application state.

The store is saved as ONE JSON document under the storage key
``course_scheduler_data`` (file: course_scheduler_data.json):

    {"users": {"admins": [...], "students": [...]}, "courses": [...]}

Location, first match wins:
- explicit path argument (CLI: --data)
- environment variable COURSEREG_DATA
- coursereg/data/course_scheduler_data.json inside the package

A missing or unreadable document is not an error: loading silently falls back
to the demo dataset, so the application always starts.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from coursereg.model import Store, default_store

logger = logging.getLogger(__name__)

STORAGE_KEY = "course_scheduler_data"
DATA_ENV_VAR = "COURSEREG_DATA"


def default_store_path() -> Path:
    """
    Return the data file path when no explicit path is given.

    Using a function instead of a constant makes testing easier,
    because tests can set the environment variable.
    """
    env = os.environ.get(DATA_ENV_VAR, "").strip()
    if env:
        return Path(env)
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / f"{STORAGE_KEY}.json"


def _resolve(path: str | Path | None) -> Path:
    return Path(path) if path is not None else default_store_path()


def load_store(path: str | Path | None = None) -> Store:
    """
    Load the store snapshot from disk.

    Returns the default dataset if the file does not exist or is invalid.
    """
    store_path = _resolve(path)

    # First run: nothing saved yet
    if not store_path.exists():
        logger.info("No saved data at %s, using default dataset", store_path)
        return default_store()

    try:
        data = json.loads(store_path.read_text(encoding="utf-8"))
        return Store.from_dict(data)
    except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError, TypeError, ValueError) as e:
        logger.warning("Failed to parse storage at %s, resetting to default dataset: %s", store_path, e)
        return default_store()


def save_store(store: Store, path: str | Path | None = None) -> Path:
    """
    Write the snapshot to disk, creating parent directories if needed.
    Returns the path written.
    """
    store_path = _resolve(path)
    store_path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(store.to_dict(), indent=2, ensure_ascii=False)
    store_path.write_text(payload, encoding="utf-8")
    logger.debug("Saved store to %s", store_path)
    return store_path
