import json
import logging
import os
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from errors import StoreReadError, StoreWriteError
from logging_helper import log_event

PETS = "pets.json"
APPOINTMENTS = "appointments.json"
LATEST_APPOINTMENT = "latest_appointment.json"
SCHEDULE = "schedule.json"
PRODUCTS = "petshop_store.json"
PURCHASES = "purchases.json"


def load_json(path):
    """
    Purpose:  Low-level helper that reads and parses a single JSON file from disk.

    Raises: FileNotFoundError, PermissionError, JSONDecodeError, etc.
    The caller decides which of those are errors.
    """
    with open(path, "r", encoding="utf-8") as file:
        return json.load(file)


class DocumentStore:
    """
    Whole-file JSON collections living under one directory.

    Every operation reads or replaces a complete file; there is no indexing
    and no partial update. A collection whose file does not exist reads as
    an empty list.
    """

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path(self, name: str) -> Path:
        return self.data_dir / name

    def lock(self, name: str) -> threading.RLock:
        """Per-file lock for read-modify-write sequences on `name`."""
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.RLock()
            return lock

    def read(self, name: str):
        path = self.path(name)
        try:
            return load_json(path)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            log_event("store_read_failed", logging.ERROR, file=str(path), error=str(exc))
            raise StoreReadError() from exc

    def write(self, name: str, documents) -> None:
        path = self.path(name)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self.data_dir), suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as file:
                    json.dump(documents, file, indent=2, ensure_ascii=False)
                os.replace(tmp, path)
            finally:
                if os.path.exists(tmp):
                    os.remove(tmp)
        except (OSError, TypeError, ValueError) as exc:
            log_event("store_write_failed", logging.ERROR, file=str(path), error=str(exc))
            raise StoreWriteError() from exc

    def read_many(self, *names: str) -> tuple:
        """
        Purpose:  Loads several collections in parallel and returns them as a
                  tuple in the order the names were given.

        A failure in any one of them propagates (fut.result() re-raises).
        """
        if len(names) == 1:
            return (self.read(names[0]),)

        results = {}
        with ThreadPoolExecutor(max_workers=len(names)) as executor:
            future_map = {executor.submit(self.read, name): name for name in names}
            for fut in as_completed(future_map):
                results[future_map[fut]] = fut.result()
        return tuple(results[name] for name in names)
