"""Application service: Update Food Item use case.

Backs the food-item edit endpoint.  Descriptive fields are simply replaced;
a new total goes through the ledger's ``adjust_total`` so availability is
recomputed from what is currently reserved and existing reservations are
left untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import structlog

from foodshare.application.access import load_item_at, load_owned_location
from foodshare.application.dto import FoodItemDTO, food_item_to_dto
from foodshare.application.locks import KeyedLocks, food_item_key, location_key
from foodshare.domain.model.value_objects import Quantity
from foodshare.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class UpdateFoodItemHandler:

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
        food_item_id: str,
        total_quantity: str | int | None = None,
        description: str | None = None,
        unit_label: str | None = None,
        best_before: date | None = None,
        clear_best_before: bool = False,
        dietary_restrictions: list[str] | None = None,
        pickup_point_id: str | None = None,
    ) -> FoodItemDTO:
        new_total = Quantity.of(total_quantity) if total_quantity is not None else None

        with self._locks.hold([location_key(location_id), food_item_key(food_item_id)]):
            with self._uow_factory() as uow:
                location = load_owned_location(uow, location_id, business_id, "edit")
                item = load_item_at(uow, location, food_item_id)
                previous_total = item.total_quantity

                item.update_details(
                    description=description,
                    unit_label=unit_label,
                    best_before=best_before,
                    clear_best_before=clear_best_before,
                    dietary_restrictions=dietary_restrictions,
                )
                if pickup_point_id is not None and pickup_point_id != item.pickup_point_id:
                    item.move_to(location.find_pickup_point(pickup_point_id).id)
                if new_total is not None:
                    item.adjust_total(new_total)

                uow.food_items.save(item)
                uow.commit()

        if new_total is not None:
            logger.info(
                "food_item_total_adjusted",
                food_item_id=food_item_id,
                previous_total=str(previous_total),
                total=str(item.total_quantity),
                available=str(item.available_quantity),
            )
        return food_item_to_dto(item)
