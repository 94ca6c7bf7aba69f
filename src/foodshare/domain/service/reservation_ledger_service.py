"""Domain service: Reservation Ledger.

This service coordinates the cross-aggregate operation of moving quantity
between ``available`` and ``reserved`` for every line of a reservation.
It lives in the domain layer because the logic is a core business rule,
not just orchestration.

The two-phase approach (validate-then-mutate) ensures we never leave the
ledger in a partially-reserved state if one food item fails validation.
Callers run it inside a unit of work so a failure while *persisting* is
rolled back as well.
"""

from __future__ import annotations

from foodshare.domain.exceptions import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from foodshare.domain.model.food_item import FoodItem
from foodshare.domain.model.reservation import Reservation, ReservationItem
from foodshare.domain.repository.food_item_repository import FoodItemRepository


class ReservationLedgerService:

    def __init__(self, food_item_repo: FoodItemRepository) -> None:
        self._food_item_repo = food_item_repo

    def reserve_for_reservation(
        self,
        reservation: Reservation,
        pickup_point_ids: list[str],
    ) -> None:
        """Hold stock for every line item of a new reservation.

        Uses a two-phase approach:
          Phase 1: load and validate: every item exists, is still listed,
                    is offered at one of ``pickup_point_ids`` and has enough
                    available.  Fails fast before any mutation.
          Phase 2: mutate and persist: call ``reserve()`` on each item.
        """
        # Phase 1: load all food items and validate
        to_reserve: list[tuple[FoodItem, ReservationItem]] = []

        for line in reservation.items:
            item = self._load(line.food_item_id)
            if item.archived:
                raise NotFoundError(f"Food item {line.food_item_id} not found")
            if item.pickup_point_id not in pickup_point_ids:
                raise ValidationError(
                    f"Food item {item.description} is not offered at this location"
                )
            if line.quantity > item.available_quantity:
                raise InsufficientStockError(
                    f"Not enough {item.description} available "
                    f"(need {line.quantity}, have {item.available_quantity} "
                    f"{item.unit_label})"
                )
            to_reserve.append((item, line))

        # Phase 2: mutate and persist
        for item, line in to_reserve:
            item.reserve(line.quantity)
            self._food_item_repo.save(item)

    def release_for_reservation(self, reservation: Reservation) -> None:
        """Give every held quantity back to availability (cancel / expire)."""
        for line in reservation.items:
            item = self._load(line.food_item_id)
            item.release(line.quantity)
            self._food_item_repo.save(item)

    def consume_for_reservation(self, reservation: Reservation) -> None:
        """Book every held quantity as picked up."""
        for line in reservation.items:
            item = self._load(line.food_item_id)
            item.consume(line.quantity)
            self._food_item_repo.save(item)

    def _load(self, food_item_id: str) -> FoodItem:
        item = self._food_item_repo.get_by_id(food_item_id)
        if item is None:
            raise NotFoundError(f"Food item {food_item_id} not found")
        return item
