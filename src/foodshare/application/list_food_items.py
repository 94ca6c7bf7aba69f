"""Application service: List Food Items use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from foodshare.application.dto import FoodItemDTO, food_item_to_dto
from foodshare.domain.exceptions import NotFoundError
from foodshare.domain.repository.unit_of_work import UnitOfWork


class ListFoodItemsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, location_id: str, include_archived: bool = False) -> list[FoodItemDTO]:
        with self._uow_factory() as uow:
            location = uow.locations.get_by_id(location_id)
            if location is None:
                raise NotFoundError("Location not found")
            items = uow.food_items.list_by_pickup_points(
                location.pickup_point_ids(), include_archived=include_archived
            )

        items.sort(key=lambda item: item.created_at, reverse=True)
        return [food_item_to_dto(item) for item in items]
