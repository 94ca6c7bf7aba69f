"""Application service: Add Food Item use case."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import structlog

from foodshare.application.access import load_owned_location
from foodshare.application.dto import FoodItemDTO, food_item_to_dto
from foodshare.application.locks import KeyedLocks, location_key
from foodshare.domain.exceptions import ConflictError
from foodshare.domain.model.food_item import FoodItem
from foodshare.domain.model.value_objects import Quantity
from foodshare.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class AddFoodItemHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks

    def handle(
        self,
        business_id: str,
        location_id: str,
        description: str,
        total_quantity: str | int,
        unit_label: str,
        pickup_point_id: str | None = None,
        best_before: date | None = None,
        dietary_restrictions: list[str] | None = None,
    ) -> FoodItemDTO:
        """List surplus food at a location.

        Without an explicit pickup point the location's default is used.
        Dietary restriction tags are opaque labels validated upstream.
        """
        total = Quantity.of(total_quantity)

        with self._locks.hold([location_key(location_id)]):
            with self._uow_factory() as uow:
                location = load_owned_location(uow, location_id, business_id, "edit")
                if location.archived:
                    raise ConflictError(f"Location {location.name} is archived")

                if pickup_point_id is None:
                    pickup_point = location.default_pickup_point()
                else:
                    pickup_point = location.find_pickup_point(pickup_point_id)

                item = FoodItem.create(
                    pickup_point_id=pickup_point.id,
                    description=description,
                    unit_label=unit_label,
                    total_quantity=total,
                    best_before=best_before,
                    dietary_restrictions=dietary_restrictions or [],
                )
                uow.food_items.save(item)
                uow.commit()

        logger.info(
            "food_item_added",
            food_item_id=item.id,
            location_id=location_id,
            total=str(item.total_quantity),
        )
        return food_item_to_dto(item)
