import copy
import json
import logging
import os
import tempfile
import threading
from typing import Dict, List

LOG = logging.getLogger(__name__)

_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
_FILE_LOCK = threading.Lock()

SALES_SLOT = "sales.json"
EXPENSES_SLOT = "expenses.json"

DEFAULTS = {
    SALES_SLOT: [],
    EXPENSES_SLOT: [],
    "config.json": {
        "server": {
            "host": "0.0.0.0",
            "port": 5000,
            "debug": False
        },
        "mcp": {
            "host": "0.0.0.0",
            "port": 8000,
            "path": "/mcp"
        }
    }
}

def data_path(filename: str) -> str:
    os.makedirs(_DATA_DIR, exist_ok=True)
    return os.path.join(_DATA_DIR, filename)

def _atomic_write(path: str, data_obj):
    tmp_fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=_DATA_DIR)
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            json.dump(data_obj, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)

def ensure_defaults():
    os.makedirs(_DATA_DIR, exist_ok=True)
    for fname, default in DEFAULTS.items():
        path = data_path(fname)
        if not os.path.exists(path):
            with _FILE_LOCK:
                _atomic_write(path, default)

def read_json(filename: str):
    path = data_path(filename)
    with _FILE_LOCK:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

def write_json(filename: str, obj):
    path = data_path(filename)
    with _FILE_LOCK:
        _atomic_write(path, obj)

def save_records(slot: str, records: List[Dict]):
    """Overwrite a record slot with the full list."""
    write_json(slot, list(records))

def load_records(slot: str) -> List[Dict]:
    """Records stored in `slot`; an empty list when the slot is missing or unreadable."""
    try:
        data = read_json(slot)
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as e:
        LOG.warning("Discarding unreadable slot %s: %s", slot, e)
        return []
    if not isinstance(data, list):
        LOG.warning("Discarding slot %s: expected a list, got %s", slot, type(data).__name__)
        return []
    return data

def read_config() -> Dict:
    try:
        return read_json("config.json")
    except (OSError, ValueError):
        return copy.deepcopy(DEFAULTS["config.json"])
