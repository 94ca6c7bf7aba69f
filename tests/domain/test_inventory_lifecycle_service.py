"""Unit tests for archive / delete gating."""

from datetime import datetime, timezone

import pytest

from foodshare.domain.exceptions import ConflictError, NotFoundError
from foodshare.domain.model.reservation import Reservation
from foodshare.domain.model.value_objects import Quantity
from foodshare.domain.service.inventory_lifecycle_service import (
    InventoryLifecycleService,
)
from tests.fakes import FakeStore, make_food_item, make_location

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _setup():
    location = make_location()
    bread = make_food_item(location)
    store = FakeStore()
    store.seed(location, bread)
    return store, location, bread


def _held(location, bread, quantity="2") -> Reservation:
    """A reservation holding bread, with the ledger updated to match."""
    bread.reserve(Quantity.of(quantity))
    return Reservation.create(
        "user-1",
        location.default_pickup_point().id,
        [(bread.id, Quantity.of(quantity))],
        NOW,
    )


def _run(store, action, *args):
    with store.uow_factory()() as uow:
        result = getattr(InventoryLifecycleService(uow), action)(*args)
        uow.commit()
    return result


class TestFoodItemLifecycle:

    def test_archive(self):
        store, _, bread = _setup()
        _run(store, "archive_food_item", bread.id)
        assert store.food_item(bread.id).archived

    def test_archive_with_active_reservation_refused(self):
        store, location, bread = _setup()
        store.seed(_held(location, bread), bread)
        with pytest.raises(ConflictError, match="active reservations"):
            _run(store, "archive_food_item", bread.id)

    def test_delete_never_reserved(self):
        store, _, bread = _setup()
        _run(store, "delete_food_item", bread.id)
        assert store.food_item(bread.id) is None

    def test_delete_with_history_refused(self):
        store, location, bread = _setup()
        reservation = _held(location, bread)
        reservation.cancel()
        bread.release(Quantity.of("2"))
        store.seed(reservation, bread)
        with pytest.raises(ConflictError, match="Archive it instead"):
            _run(store, "delete_food_item", bread.id)
        assert store.food_item(bread.id) is not None

    def test_unknown_item(self):
        store, _, _ = _setup()
        with pytest.raises(NotFoundError):
            _run(store, "archive_food_item", "nope")


class TestLocationLifecycle:

    def test_archive_with_listed_items_refused(self):
        store, location, _ = _setup()
        with pytest.raises(ConflictError, match="archive all food items first"):
            _run(store, "archive_location", location.id)

    def test_archive_after_items_archived(self):
        store, location, bread = _setup()
        _run(store, "archive_food_item", bread.id)
        _run(store, "archive_location", location.id)
        assert store.location(location.id).archived

    def test_archive_with_active_reservation_refused(self):
        store, location, bread = _setup()
        reservation = _held(location, bread)
        # Item archived behind the ledger's back; the reservation still blocks.
        bread.archived = True
        store.seed(reservation, bread)
        with pytest.raises(ConflictError, match="active reservations"):
            _run(store, "archive_location", location.id)

    def test_delete_empty_location(self):
        location = make_location()
        store = FakeStore()
        store.seed(location)
        _run(store, "delete_location", location.id)
        assert store.location(location.id) is None

    def test_delete_with_archived_items_refused(self):
        store, location, bread = _setup()
        _run(store, "archive_food_item", bread.id)
        with pytest.raises(ConflictError, match="inventory history"):
            _run(store, "delete_location", location.id)
