"""FoodItem aggregate: the quantity ledger for one listed item.

Each FoodItem knows how much was listed (``total_quantity``) and how much
can still be reserved (``available_quantity``).  ``reserved_quantity`` is
derived from the two and never stored, so it cannot drift.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from foodshare.domain.exceptions import (
    ConflictError,
    InsufficientStockError,
    ValidationError,
)
from foodshare.domain.model.value_objects import Quantity


@dataclass
class FoodItem:
    """Aggregate root for a surplus food listing.

    Invariants:
    - ``0 <= available_quantity <= total_quantity``
    - ``reserved_quantity == total_quantity - available_quantity``
    - ``available_quantity`` is only ever changed through ``reserve()``,
      ``release()`` and ``adjust_total()``
    """

    id: str
    pickup_point_id: str
    description: str
    unit_label: str
    total_quantity: Quantity
    available_quantity: Quantity
    best_before: date | None = None
    dietary_restrictions: frozenset[str] = frozenset()
    archived: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW items only) ------------------------------------

    @staticmethod
    def create(
        pickup_point_id: str,
        description: str,
        unit_label: str,
        total_quantity: Quantity,
        best_before: date | None = None,
        dietary_restrictions: frozenset[str] | set[str] | list[str] = frozenset(),
    ) -> FoodItem:
        """List a new item: everything is available, nothing reserved."""
        if not description or not description.strip():
            raise ValidationError("Description is required")
        if not unit_label or not unit_label.strip():
            raise ValidationError("Unit label is required")
        if total_quantity.is_zero:
            raise ValidationError("Total quantity must be greater than zero")

        return FoodItem(
            id=str(uuid.uuid4()),
            pickup_point_id=pickup_point_id,
            description=description.strip(),
            unit_label=unit_label.strip(),
            total_quantity=total_quantity,
            available_quantity=total_quantity,
            best_before=best_before,
            dietary_restrictions=frozenset(dietary_restrictions),
        )

    # --- Ledger ---------------------------------------------------------------

    @property
    def reserved_quantity(self) -> Quantity:
        return self.total_quantity - self.available_quantity

    def adjust_total(self, new_total: Quantity) -> None:
        """Change the listed amount, keeping existing holds intact.

        ``available`` becomes ``new_total - reserved``.  A total below what is
        already reserved is refused with ConflictError rather than clamped,
        because clamping would leave holds larger than the listed amount.
        """
        reserved = self.reserved_quantity
        if new_total < reserved:
            raise ConflictError(
                f"Cannot reduce total for {self.description} to {new_total} "
                f"with {reserved} {self.unit_label} currently reserved. "
                f"Cancel reservations first."
            )
        self.total_quantity = new_total
        self.available_quantity = new_total - reserved
        self._check_invariants()

    def reserve(self, quantity: Quantity) -> None:
        """Move *quantity* from available to reserved.

        Raises InsufficientStockError if not enough is available.
        """
        if quantity.is_zero:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_quantity:
            raise InsufficientStockError(
                f"Not enough {self.description} available "
                f"(need {quantity}, have {self.available_quantity} {self.unit_label})"
            )
        self.available_quantity = self.available_quantity - quantity
        self._check_invariants()

    def release(self, quantity: Quantity) -> None:
        """Return a previously reserved *quantity* to availability."""
        if quantity.is_zero:
            raise ValidationError("Release quantity must be positive")
        if quantity > self.reserved_quantity:
            raise ValidationError(
                f"Cannot release {quantity} of {self.description} "
                f"while only {self.reserved_quantity} currently reserved"
            )
        self.available_quantity = self.available_quantity + quantity
        self._check_invariants()

    def consume(self, quantity: Quantity) -> None:
        """Book a picked-up hold: reserved and total drop, available stays."""
        if quantity.is_zero:
            raise ValidationError("Consumed quantity must be positive")
        if quantity > self.reserved_quantity:
            raise ValidationError(
                f"Cannot consume {quantity} of {self.description} "
                f"while only {self.reserved_quantity} currently reserved"
            )
        self.total_quantity = self.total_quantity - quantity
        self._check_invariants()

    # --- Listing details ------------------------------------------------------

    def update_details(
        self,
        description: str | None = None,
        unit_label: str | None = None,
        best_before: date | None = None,
        dietary_restrictions: frozenset[str] | set[str] | list[str] | None = None,
        clear_best_before: bool = False,
    ) -> None:
        """Edit the descriptive fields; ``None`` leaves a field unchanged."""
        if self.archived:
            raise ConflictError(f"Food item {self.description} is archived")
        if description is not None:
            if not description.strip():
                raise ValidationError("Description cannot be blank")
            self.description = description.strip()
        if unit_label is not None:
            if not unit_label.strip():
                raise ValidationError("Unit label cannot be blank")
            self.unit_label = unit_label.strip()
        if clear_best_before:
            self.best_before = None
        elif best_before is not None:
            self.best_before = best_before
        if dietary_restrictions is not None:
            self.dietary_restrictions = frozenset(dietary_restrictions)

    def move_to(self, pickup_point_id: str) -> None:
        if self.archived:
            raise ConflictError(f"Food item {self.description} is archived")
        self.pickup_point_id = pickup_point_id

    def archive(self) -> None:
        """Soft-delete the listing; quantities are kept for the audit trail."""
        if not self.reserved_quantity.is_zero:
            raise ConflictError(
                f"Cannot archive {self.description} with active reservations. "
                f"Cancel reservations first."
            )
        self.archived = True

    # --- Internal helpers -----------------------------------------------------

    def _check_invariants(self) -> None:
        if self.available_quantity > self.total_quantity:
            raise ValidationError(
                f"Ledger for {self.description} is inconsistent: available "
                f"{self.available_quantity} exceeds total {self.total_quantity}"
            )
