"""Reservation aggregate: a user's hold on food at one pickup point.

The Reservation owns its line items; they are created with it, are never
detached, and never change afterwards.  All lifecycle rules live here.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from foodshare.domain.exceptions import InvalidTransitionError, ValidationError
from foodshare.domain.model.value_objects import Quantity


class ReservationStatus(Enum):
    ACTIVE = "active"
    PICKED_UP = "picked_up"
    CANCELED = "canceled"
    EXPIRED = "expired"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
RESERVATION_TTL = timedelta(hours=24)
MAX_LINE_ITEMS = 50


@dataclass(frozen=True)
class ReservationItem:
    """How much of one food item a reservation holds."""

    reservation_id: str
    food_item_id: str
    quantity: Quantity

    def __post_init__(self) -> None:
        if self.quantity.is_zero:
            raise ValidationError("Reserved quantity must be positive")


@dataclass
class Reservation:
    """Aggregate root for reservations.

    Use the ``Reservation.create()`` factory for new reservations; it
    enforces all business rules.  The ``__init__`` is intentionally simple
    so the repository can reconstitute persisted rows without re-validating.

    ``active`` is the only non-terminal status; every transition starts
    from it and none leaves a terminal status.
    """

    id: str
    user_id: str
    pickup_point_id: str
    items: list[ReservationItem]
    status: ReservationStatus = ReservationStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.expires_at is None:
            self.expires_at = self.created_at + RESERVATION_TTL

    # --- Factory (used for NEW reservations only) -----------------------------

    @staticmethod
    def create(
        user_id: str,
        pickup_point_id: str,
        lines: list[tuple[str, Quantity]],
        now: datetime,
    ) -> Reservation:
        """Create an active reservation from ``(food_item_id, quantity)`` pairs.

        Repeated food items are merged into a single line.
        """
        if not user_id:
            raise ValidationError("User is required")
        if not lines:
            raise ValidationError("Reservation must contain at least one item")

        merged: dict[str, Quantity] = {}
        for food_item_id, quantity in lines:
            if not food_item_id:
                raise ValidationError("Food item ID is required")
            if quantity.is_zero:
                raise ValidationError("Reserved quantity must be positive")
            merged[food_item_id] = merged.get(food_item_id, Quantity.zero()) + quantity

        if len(merged) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per reservation")

        reservation_id = str(uuid.uuid4())
        return Reservation(
            id=reservation_id,
            user_id=user_id,
            pickup_point_id=pickup_point_id,
            items=[
                ReservationItem(reservation_id, food_item_id, quantity)
                for food_item_id, quantity in merged.items()
            ],
            status=ReservationStatus.ACTIVE,
            created_at=now,
            expires_at=now + RESERVATION_TTL,
        )

    # --- State transitions ----------------------------------------------------

    def cancel(self) -> None:
        """Transition ACTIVE -> CANCELED (user-initiated).

        Releasing the held quantities must happen in the same unit of work
        (coordinated by the application handler via the domain service).
        """
        self._leave_active(ReservationStatus.CANCELED, "cancel")

    def expire(self, now: datetime) -> None:
        """Transition ACTIVE -> EXPIRED once the TTL has run out."""
        if self.status == ReservationStatus.ACTIVE and not self.is_overdue(now):
            raise InvalidTransitionError(
                f"Reservation {self.id} does not expire until "
                f"{self.expires_at.isoformat()}"
            )
        self._leave_active(ReservationStatus.EXPIRED, "expire")

    def mark_picked_up(self) -> None:
        """Transition ACTIVE -> PICKED_UP (fulfillment)."""
        self._leave_active(ReservationStatus.PICKED_UP, "pick up")

    # --- Queries --------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def is_overdue(self, now: datetime) -> bool:
        """True for an active reservation whose TTL has run out."""
        return self.is_active and now >= self.expires_at

    def food_item_ids(self) -> list[str]:
        return [item.food_item_id for item in self.items]

    # --- Internal helpers -----------------------------------------------------

    def _leave_active(self, target: ReservationStatus, verb: str) -> None:
        if self.status != ReservationStatus.ACTIVE:
            raise InvalidTransitionError(
                f"Cannot {verb} a {self.status.value} reservation. "
                f"Only active reservations can be changed."
            )
        self.status = target
