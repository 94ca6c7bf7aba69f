"""JSON-document implementation of UnitOfWork.

Reads come from a snapshot taken when the unit of work begins, overlaid
with whatever this unit of work has staged.  Nothing reaches the file until
``commit()``, which hands the whole change set to the document store in a
single atomic write, together with the snapshot copy of every staged row.
The store refuses the write if any of those rows changed since the
snapshot was taken, so two units of work cannot both spend the same stock.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from foodshare.domain.repository.unit_of_work import UnitOfWork
from foodshare.infrastructure.persistence.json_document_store import (
    TABLES,
    ChangeSet,
    JsonDocumentStore,
    Rows,
)
from foodshare.infrastructure.persistence.json_food_item_repository import (
    JsonFoodItemRepository,
)
from foodshare.infrastructure.persistence.json_location_repository import (
    JsonLocationRepository,
)
from foodshare.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)

logger = structlog.get_logger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonDocumentStore(file_path)
        self._snapshot: dict[str, Rows] = {table: {} for table in TABLES}
        self._staged: ChangeSet = {table: {} for table in TABLES}
        self.food_items = JsonFoodItemRepository(self)
        self.reservations = JsonReservationRepository(self)
        self.locations = JsonLocationRepository(self)

    # --- Staging API used by the repositories ---------------------------------

    def rows(self, table: str) -> Rows:
        """The snapshot of *table* with this unit of work's changes applied."""
        merged = dict(self._snapshot[table])
        for key, raw in self._staged[table].items():
            if raw is None:
                merged.pop(key, None)
            else:
                merged[key] = raw
        return merged

    def stage(self, table: str, key: str, raw: dict | None) -> None:
        self._staged[table][key] = raw

    # --- UnitOfWork interface -------------------------------------------------

    def _begin(self) -> None:
        self._snapshot = self._store.read()
        self._staged = {table: {} for table in TABLES}

    def _commit(self) -> None:
        if any(self._staged.values()):
            expected = {
                table: {key: self._snapshot[table].get(key) for key in rows}
                for table, rows in self._staged.items()
            }
            self._store.apply(self._staged, expected)
            self._snapshot = {table: self.rows(table) for table in TABLES}
        self._staged = {table: {} for table in TABLES}

    def rollback(self) -> None:
        discarded = sum(len(rows) for rows in self._staged.values())
        if discarded:
            logger.info("unit_of_work_rolled_back", discarded_rows=discarded)
        self._staged = {table: {} for table in TABLES}
