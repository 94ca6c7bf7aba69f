"""JSON-file-backed document holding every table of the core.

One file, one document: ``{"locations": [...], "food_items": [...],
"reservations": [...], "reservation_items": [...]}``.  Writes replace the
whole file atomically (temp file + ``os.replace``) so a reader never sees a
half-written document.

A staged change set is applied to the *current* document while holding both
a per-file thread lock and an exclusive ``flock`` on a sidecar ``.lock``
file, so writers in other processes (every CLI command is one) are
serialised too.  Before writing, each staged row is compared with the copy
the writer read when it began; if another writer changed that row in the
meantime the whole change set is rejected with WriteConflictError.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog

from foodshare.domain.exceptions import StorageError, WriteConflictError

logger = structlog.get_logger(__name__)

TABLES = ("locations", "food_items", "reservations", "reservation_items")

# Rows are addressed by a key built from the row itself.
Rows = dict[str, dict]
ChangeSet = dict[str, dict[str, dict | None]]

_FILE_LOCKS: dict[Path, threading.Lock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def row_key(table: str, raw: dict) -> str:
    if table == "reservation_items":
        return f"{raw['reservation_id']}:{raw['food_item_id']}"
    return raw["id"]


def _lock_for(path: Path) -> threading.Lock:
    with _FILE_LOCKS_GUARD:
        return _FILE_LOCKS.setdefault(path, threading.Lock())


class JsonDocumentStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()
        self._lock_path = self._file_path.with_name(self._file_path.name + ".lock")
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    def read(self) -> dict[str, Rows]:
        """Return every table as ``{row_key: raw_row}``."""
        with self._lock:
            return self._load()

    def apply(self, changes: ChangeSet, expected: ChangeSet | None = None) -> None:
        """Upsert (row) or delete (``None``) every staged row in one write.

        *expected* maps the same keys to the rows the caller based its
        changes on (``None`` for rows that did not exist).  If any of them
        no longer matches the document, nothing is written.
        """
        with self._exclusive():
            tables = self._load()
            if expected:
                self._check_unchanged(tables, expected)
            for table, rows in changes.items():
                for key, raw in rows.items():
                    if raw is None:
                        tables[table].pop(key, None)
                    else:
                        tables[table][key] = raw
            self._persist(tables)
        logger.debug(
            "document_written",
            path=str(self._file_path),
            rows=sum(len(rows) for rows in changes.values()),
        )

    def _check_unchanged(self, tables: dict[str, Rows], expected: ChangeSet) -> None:
        for table, rows in expected.items():
            for key, raw in rows.items():
                if tables[table].get(key) != raw:
                    logger.info(
                        "write_conflict", path=str(self._file_path), table=table, key=key
                    )
                    raise WriteConflictError(
                        f"{table} row {key} was changed by another writer; retry"
                    )

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        with self._lock:
            try:
                lock_file = open(self._lock_path, "a")
            except OSError as exc:
                raise StorageError(f"Cannot lock {self._file_path}: {exc}") from exc
            with lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _load(self) -> dict[str, Rows]:
        try:
            document = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read {self._file_path}: {exc}") from exc
        return {
            table: {row_key(table, raw): raw for raw in document.get(table, [])}
            for table in TABLES
        }

    def _persist(self, tables: dict[str, Rows]) -> None:
        document = {table: list(tables[table].values()) for table in TABLES}
        payload = json.dumps(document, indent=2) + "\n"
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=".foodshare-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    tmp.write(payload)
                os.replace(tmp_name, self._file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create {self._file_path}: {exc}") from exc
        with self._exclusive():
            if not self._file_path.exists():
                self._persist({table: {} for table in TABLES})
