"""JSON-document-backed implementation of FoodItemRepository."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from foodshare.domain.model.food_item import FoodItem
from foodshare.domain.model.value_objects import Quantity
from foodshare.domain.repository.food_item_repository import FoodItemRepository

if TYPE_CHECKING:
    from foodshare.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

_TABLE = "food_items"


class JsonFoodItemRepository(FoodItemRepository):

    def __init__(self, uow: JsonUnitOfWork) -> None:
        self._uow = uow

    # --- FoodItemRepository interface -----------------------------------------

    def get_by_id(self, food_item_id: str) -> FoodItem | None:
        raw = self._uow.rows(_TABLE).get(food_item_id)
        return self._to_domain(raw) if raw is not None else None

    def list_by_pickup_points(
        self,
        pickup_point_ids: list[str],
        include_archived: bool = False,
    ) -> list[FoodItem]:
        wanted = set(pickup_point_ids)
        return [
            self._to_domain(raw)
            for raw in self._uow.rows(_TABLE).values()
            if raw["pickup_point_id"] in wanted
            and (include_archived or not raw.get("archived", False))
        ]

    def save(self, item: FoodItem) -> None:
        self._uow.stage(_TABLE, item.id, self._to_raw(item))

    def delete(self, food_item_id: str) -> None:
        self._uow.stage(_TABLE, food_item_id, None)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: FoodItem) -> dict:
        # reserved_quantity is derived and deliberately not written.
        return {
            "id": item.id,
            "pickup_point_id": item.pickup_point_id,
            "description": item.description,
            "unit_label": item.unit_label,
            "total_quantity": str(item.total_quantity.amount),
            "available_quantity": str(item.available_quantity.amount),
            "best_before": item.best_before.isoformat() if item.best_before else None,
            "dietary_restrictions": sorted(item.dietary_restrictions),
            "archived": item.archived,
            "created_at": item.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> FoodItem:
        best_before = raw.get("best_before")
        return FoodItem(
            id=raw["id"],
            pickup_point_id=raw["pickup_point_id"],
            description=raw["description"],
            unit_label=raw["unit_label"],
            total_quantity=Quantity(Decimal(raw["total_quantity"])),
            available_quantity=Quantity(Decimal(raw["available_quantity"])),
            best_before=date.fromisoformat(best_before) if best_before else None,
            dietary_restrictions=frozenset(raw.get("dietary_restrictions", [])),
            archived=raw.get("archived", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
