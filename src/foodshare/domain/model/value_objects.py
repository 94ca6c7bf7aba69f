"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from foodshare.domain.exceptions import ValidationError

# Smallest bookable unit: one thousandth of the item's unit label.
QUANTITY_STEP = Decimal("0.001")


@dataclass(frozen=True)
class Quantity:
    """A non-negative amount of food, in the item's own unit.

    Uses Decimal so that repeated reserve/release cycles on fractional
    units (kg, litres) never drift the way binary floats would.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Quantity amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Quantity must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(f"Quantity cannot be negative, got {self.amount}")
        try:
            quantized = self.amount.quantize(QUANTITY_STEP)
        except InvalidOperation as exc:
            raise ValidationError(f"Quantity {self.amount} is out of range") from exc
        if self.amount != quantized:
            raise ValidationError(
                f"Quantity {self.amount} is finer than the minimal unit {QUANTITY_STEP}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.amount + other.amount)

    def __sub__(self, other: Quantity) -> Quantity:
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError(
                f"Cannot subtract {other} from {self}: result would be negative"
            )
        return Quantity(result)

    def __lt__(self, other: Quantity) -> bool:
        return self.amount < other.amount

    def __le__(self, other: Quantity) -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: Quantity) -> bool:
        return self.amount > other.amount

    def __ge__(self, other: Quantity) -> bool:
        return self.amount >= other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        normalized = self.amount.normalize()
        # normalize() turns 100 into 1E+2
        return f"{normalized:f}"

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Quantity:
        """Convenient factory that coerces to Decimal safely."""
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid quantity: {amount!r}")
        try:
            return Quantity(Decimal(str(amount).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid quantity: {amount!r}") from exc

    @staticmethod
    def zero() -> Quantity:
        return Quantity(Decimal("0"))
