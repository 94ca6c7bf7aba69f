"""Domain service: Inventory Lifecycle.

Gates the destructive operations on food items and locations.  Archival is
a soft delete that keeps the rows for the audit trail; a hard delete is only
allowed for records that never took part in a reservation.
"""

from __future__ import annotations

from foodshare.domain.exceptions import ConflictError, NotFoundError
from foodshare.domain.model.food_item import FoodItem
from foodshare.domain.model.location import BusinessLocation
from foodshare.domain.repository.unit_of_work import UnitOfWork


class InventoryLifecycleService:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    # --- Food items -----------------------------------------------------------

    def archive_food_item(self, food_item_id: str) -> FoodItem:
        item = self._load_food_item(food_item_id)
        item.archive()
        self._uow.food_items.save(item)
        return item

    def delete_food_item(self, food_item_id: str) -> FoodItem:
        """Hard-delete an item that nobody ever reserved."""
        item = self._load_food_item(food_item_id)
        if not item.reserved_quantity.is_zero:
            raise ConflictError(
                f"Cannot delete {item.description} with active reservations. "
                f"Cancel reservations first."
            )
        if self._uow.reservations.has_items_for(item.id):
            raise ConflictError(
                f"Cannot delete {item.description}: it has reservation history. "
                f"Archive it instead."
            )
        self._uow.food_items.delete(item.id)
        return item

    # --- Locations ------------------------------------------------------------

    def archive_location(self, location_id: str) -> BusinessLocation:
        location = self._load_location(location_id)
        pickup_point_ids = location.pickup_point_ids()

        open_items = self._uow.food_items.list_by_pickup_points(pickup_point_ids)
        if open_items:
            raise ConflictError(
                "Cannot archive location with active food items. "
                "Please archive all food items first."
            )

        for reservation in self._uow.reservations.list_active():
            if reservation.pickup_point_id in pickup_point_ids:
                raise ConflictError(
                    "Cannot archive location with active reservations. "
                    "Wait for all reservations to be completed first."
                )

        location.archive()
        self._uow.locations.save(location)
        return location

    def delete_location(self, location_id: str) -> BusinessLocation:
        """Hard-delete a location that never had inventory."""
        location = self._load_location(location_id)
        pickup_point_ids = location.pickup_point_ids()

        any_items = self._uow.food_items.list_by_pickup_points(
            pickup_point_ids, include_archived=True
        )
        if any_items or self._uow.reservations.has_any_at_pickup_points(pickup_point_ids):
            raise ConflictError(
                f"Cannot delete location {location.name}: it has inventory history. "
                f"Archive it instead."
            )

        self._uow.locations.delete(location.id)
        return location

    # --- Internal helpers -----------------------------------------------------

    def _load_food_item(self, food_item_id: str) -> FoodItem:
        item = self._uow.food_items.get_by_id(food_item_id)
        if item is None:
            raise NotFoundError(f"Food item {food_item_id} not found")
        return item

    def _load_location(self, location_id: str) -> BusinessLocation:
        location = self._uow.locations.get_by_id(location_id)
        if location is None:
            raise NotFoundError(f"Location {location_id} not found")
        return location
