"""Application service: Delete Location use case."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from foodshare.application.access import load_owned_location
from foodshare.application.locks import KeyedLocks, location_key
from foodshare.domain.repository.unit_of_work import UnitOfWork
from foodshare.domain.service.inventory_lifecycle_service import (
    InventoryLifecycleService,
)

logger = structlog.get_logger(__name__)


class DeleteLocationHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks

    def handle(self, business_id: str, location_id: str) -> None:
        """Hard-delete a location that never had any inventory."""
        with self._locks.hold([location_key(location_id)]):
            with self._uow_factory() as uow:
                load_owned_location(uow, location_id, business_id, "delete")
                InventoryLifecycleService(uow).delete_location(location_id)
                uow.commit()

        logger.info("location_deleted", location_id=location_id)
