"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the inbound layers (CLI, HTTP) and the
application layer without exposing domain internals to the outside world.
Quantities travel as strings so no caller ever sees a float.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from foodshare.domain.model.food_item import FoodItem
from foodshare.domain.model.location import BusinessLocation
from foodshare.domain.model.reservation import Reservation

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class ReservationItemSpec:
    """Input: what the user asked for (food item + quantity)."""

    food_item_id: str
    quantity: str | int | Decimal


@dataclass(frozen=True)
class ReservationItemDTO:
    food_item_id: str
    description: str
    unit_label: str
    quantity: str


@dataclass(frozen=True)
class ReservationDTO:
    id: str
    user_id: str
    pickup_point_id: str
    status: str
    items: list[ReservationItemDTO]
    created_at: str
    expires_at: str


@dataclass(frozen=True)
class FoodItemDTO:
    id: str
    pickup_point_id: str
    description: str
    unit_label: str
    total: str
    available: str
    reserved: str
    best_before: str | None
    dietary_restrictions: list[str]
    archived: bool
    created_at: str


@dataclass(frozen=True)
class PickupPointDTO:
    id: str
    name: str
    is_default: bool


@dataclass(frozen=True)
class LocationDTO:
    id: str
    business_id: str
    name: str
    address: str
    archived: bool
    pickup_points: list[PickupPointDTO]


# --- Mapping ------------------------------------------------------------------


def _timestamp(value: datetime) -> str:
    return value.strftime(_TIMESTAMP_FORMAT)


def food_item_to_dto(item: FoodItem) -> FoodItemDTO:
    return FoodItemDTO(
        id=item.id,
        pickup_point_id=item.pickup_point_id,
        description=item.description,
        unit_label=item.unit_label,
        total=str(item.total_quantity),
        available=str(item.available_quantity),
        reserved=str(item.reserved_quantity),
        best_before=item.best_before.isoformat() if item.best_before else None,
        dietary_restrictions=sorted(item.dietary_restrictions),
        archived=item.archived,
        created_at=_timestamp(item.created_at),
    )


def reservation_to_dto(
    reservation: Reservation,
    find_food_item: Callable[[str], FoodItem | None],
) -> ReservationDTO:
    """Map a reservation; *find_food_item* supplies descriptions by ID.

    Items that were hard-deleted since are shown without a description.
    """
    items = []
    for line in reservation.items:
        food = find_food_item(line.food_item_id)
        items.append(
            ReservationItemDTO(
                food_item_id=line.food_item_id,
                description=food.description if food else "",
                unit_label=food.unit_label if food else "",
                quantity=str(line.quantity),
            )
        )
    return ReservationDTO(
        id=reservation.id,
        user_id=reservation.user_id,
        pickup_point_id=reservation.pickup_point_id,
        status=reservation.status.value,
        items=items,
        created_at=_timestamp(reservation.created_at),
        expires_at=_timestamp(reservation.expires_at),  # type: ignore[arg-type]
    )


def location_to_dto(location: BusinessLocation) -> LocationDTO:
    return LocationDTO(
        id=location.id,
        business_id=location.business_id,
        name=location.name,
        address=location.address,
        archived=location.archived,
        pickup_points=[
            PickupPointDTO(id=pp.id, name=pp.name, is_default=pp.is_default)
            for pp in location.pickup_points
        ],
    )
