"""Abstract repository for FoodItem aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from foodshare.domain.model.food_item import FoodItem


class FoodItemRepository(ABC):

    @abstractmethod
    def get_by_id(self, food_item_id: str) -> FoodItem | None:
        """Return a food item by its ID, or None if not found."""

    @abstractmethod
    def list_by_pickup_points(
        self,
        pickup_point_ids: list[str],
        include_archived: bool = False,
    ) -> list[FoodItem]:
        """Return the items listed at any of the given pickup points."""

    @abstractmethod
    def save(self, item: FoodItem) -> None:
        """Persist a new or updated food item."""

    @abstractmethod
    def delete(self, food_item_id: str) -> None:
        """Permanently remove a food item."""
