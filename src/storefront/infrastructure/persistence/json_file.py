"""A JSON array on disk, shared safely between repository instances.

Each file path gets one process-wide re-entrant lock so that a
read-modify-write done under ``with json_file.lock`` is atomic with
respect to every other repository pointing at the same file.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

from storefront.domain.exceptions import PersistenceError

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _locks_guard:
        return _locks.setdefault(path.resolve(), threading.RLock())


class JsonFile:

    def __init__(self, path: Path) -> None:
        self.path = path
        self.lock = _lock_for(path)
        self._ensure_file()

    def read(self) -> list[dict]:
        try:
            records = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(records, list):
            raise PersistenceError(f"{self.path} does not hold a JSON array")
        return records

    def write(self, records: list[dict]) -> None:
        # Write to a sibling file and swap it in so readers never see
        # a half-written array.
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc

    def _ensure_file(self) -> None:
        with self.lock:
            if self.path.exists():
                return
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text("[]", encoding="utf-8")
            except OSError as exc:
                raise PersistenceError(f"Cannot create {self.path}: {exc}") from exc


def next_numeric_id(records: list[dict]) -> str:
    """One past the highest numeric id on file, as a string."""
    numeric = [int(r["id"]) for r in records if str(r.get("id", "")).isdigit()]
    return str(max(numeric, default=0) + 1)
