"""Unit tests for the Quantity value object."""

from decimal import Decimal

import pytest

from foodshare.domain.exceptions import ValidationError
from foodshare.domain.model.value_objects import Quantity


class TestQuantityCreation:

    def test_from_string(self):
        assert Quantity.of("2.5").amount == Decimal("2.5")

    def test_from_int(self):
        assert Quantity.of(3).amount == Decimal("3")

    def test_zero(self):
        assert Quantity.zero().is_zero

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Quantity.of("-1")

    def test_finer_than_minimal_unit_rejected(self):
        with pytest.raises(ValidationError, match="minimal unit"):
            Quantity.of("0.0001")

    def test_three_decimals_accepted(self):
        assert str(Quantity.of("0.125")) == "0.125"

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid quantity"):
            Quantity.of("lots")

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            Quantity.of(True)

    def test_infinity_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Quantity.of("Infinity")

    def test_float_goes_through_str(self):
        assert Quantity.of(0.1) == Quantity.of("0.1")


class TestQuantityArithmetic:

    def test_add(self):
        assert Quantity.of("1.5") + Quantity.of("2") == Quantity.of("3.5")

    def test_subtract(self):
        assert Quantity.of("5") - Quantity.of("1.25") == Quantity.of("3.75")

    def test_subtract_below_zero_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            Quantity.of("1") - Quantity.of("2")

    def test_repeated_fractional_cycles_do_not_drift(self):
        q = Quantity.of("1")
        step = Quantity.of("0.1")
        for _ in range(10):
            q = q - step
        assert q.is_zero

    def test_comparisons(self):
        assert Quantity.of("1") < Quantity.of("2")
        assert Quantity.of("2") >= Quantity.of("2")

    def test_str_normalizes(self):
        assert str(Quantity.of("100")) == "100"
        assert str(Quantity.of("2.500")) == "2.5"
