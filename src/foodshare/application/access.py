"""Ownership checks shared by the business-side use cases."""

from __future__ import annotations

from foodshare.domain.exceptions import AuthorizationError, NotFoundError
from foodshare.domain.model.food_item import FoodItem
from foodshare.domain.model.location import BusinessLocation
from foodshare.domain.repository.unit_of_work import UnitOfWork


def load_owned_location(
    uow: UnitOfWork,
    location_id: str,
    business_id: str,
    action: str,
) -> BusinessLocation:
    location = uow.locations.get_by_id(location_id)
    if location is None:
        raise NotFoundError("Location not found")
    if location.business_id != business_id:
        raise AuthorizationError(f"You do not have permission to {action} this location")
    return location


def load_item_at(
    uow: UnitOfWork,
    location: BusinessLocation,
    food_item_id: str,
) -> FoodItem:
    item = uow.food_items.get_by_id(food_item_id)
    if item is None:
        raise NotFoundError("Food item not found")
    if item.pickup_point_id not in location.pickup_point_ids():
        raise AuthorizationError("Food item does not belong to this location")
    return item
