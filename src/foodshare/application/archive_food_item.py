"""Application service: Archive Food Item use case.

Archiving hides the listing but keeps the row and its ledger for the audit
trail.  It is refused while any quantity is still reserved.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from foodshare.application.access import load_item_at, load_owned_location
from foodshare.application.dto import FoodItemDTO, food_item_to_dto
from foodshare.application.locks import KeyedLocks, food_item_key, location_key
from foodshare.domain.repository.unit_of_work import UnitOfWork
from foodshare.domain.service.inventory_lifecycle_service import (
    InventoryLifecycleService,
)

logger = structlog.get_logger(__name__)


class ArchiveFoodItemHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks

    def handle(self, business_id: str, location_id: str, food_item_id: str) -> FoodItemDTO:
        with self._locks.hold([location_key(location_id), food_item_key(food_item_id)]):
            with self._uow_factory() as uow:
                location = load_owned_location(uow, location_id, business_id, "edit")
                load_item_at(uow, location, food_item_id)

                item = InventoryLifecycleService(uow).archive_food_item(food_item_id)
                uow.commit()

        logger.info("food_item_archived", food_item_id=food_item_id)
        return food_item_to_dto(item)
