"""Integration tests for the CreateReservation use case.

Uses the in-memory fake store: no file I/O.
"""

import pytest

from foodshare.application.create_reservation import CreateReservationHandler
from foodshare.application.dto import ReservationItemSpec
from foodshare.application.locks import KeyedLocks
from foodshare.domain.exceptions import (
    InsufficientStockError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from foodshare.domain.model.value_objects import Quantity
from tests.fakes import FakeClock, FakeStore, make_food_item, make_location


def _setup():
    location = make_location()
    bread = make_food_item(location, total="10", description="Bread")
    soup = make_food_item(location, total="3", description="Soup", unit_label="l")
    cake = make_food_item(location, total="1", description="Cake", unit_label="slices")
    store = FakeStore()
    store.seed(location, bread, soup, cake)
    handler = CreateReservationHandler(store.uow_factory(), KeyedLocks(), FakeClock())
    return handler, store, location, (bread, soup, cake)


class TestCreateReservationHappyPath:

    def test_reserves_and_returns_active_reservation(self):
        handler, store, location, (bread, soup, _) = _setup()
        dto = handler.handle("user-1", location.id, [
            ReservationItemSpec(bread.id, "4"),
            ReservationItemSpec(soup.id, "1.5"),
        ])

        assert dto.status == "active"
        assert dto.user_id == "user-1"
        assert dto.pickup_point_id == location.default_pickup_point().id
        assert [(i.description, i.quantity) for i in dto.items] == [("Bread", "4"), ("Soup", "1.5")]
        assert dto.created_at == "2024-06-01 12:00 UTC"
        assert dto.expires_at == "2024-06-02 12:00 UTC"

    def test_ledger_updated(self):
        handler, store, location, (bread, soup, _) = _setup()
        handler.handle("user-1", location.id, [
            ReservationItemSpec(bread.id, "4"),
            ReservationItemSpec(soup.id, "1.5"),
        ])
        assert store.food_item(bread.id).available_quantity == Quantity.of("6")
        assert store.food_item(bread.id).reserved_quantity == Quantity.of("4")
        assert store.food_item(soup.id).available_quantity == Quantity.of("1.5")

    def test_persists_reservation(self):
        handler, store, location, (bread, _, _) = _setup()
        dto = handler.handle("user-1", location.id, [ReservationItemSpec(bread.id, 1)])
        saved = store.reservation(dto.id)
        assert saved is not None
        assert saved.food_item_ids() == [bread.id]

    def test_duplicate_lines_merged(self):
        handler, store, location, (bread, _, _) = _setup()
        dto = handler.handle("user-1", location.id, [
            ReservationItemSpec(bread.id, 2),
            ReservationItemSpec(bread.id, 3),
        ])
        assert [i.quantity for i in dto.items] == ["5"]
        assert store.food_item(bread.id).available_quantity == Quantity.of("5")


class TestCreateReservationRejections:

    def test_insufficient_stock_changes_nothing(self):
        handler, store, location, (bread, soup, _) = _setup()
        commits_before = store.commits
        with pytest.raises(InsufficientStockError, match="Not enough Soup"):
            handler.handle("user-1", location.id, [
                ReservationItemSpec(bread.id, "4"),
                ReservationItemSpec(soup.id, "3.5"),
            ])
        assert store.food_item(bread.id).available_quantity == Quantity.of("10")
        assert store.tables["reservations"] == {}
        assert store.commits == commits_before

    def test_items_required(self):
        handler, _, location, _ = _setup()
        with pytest.raises(ValidationError, match="Location ID and items are required"):
            handler.handle("user-1", location.id, [])

    def test_location_required(self):
        handler, _, _, (bread, _, _) = _setup()
        with pytest.raises(ValidationError, match="Location ID and items are required"):
            handler.handle("user-1", "", [ReservationItemSpec(bread.id, 1)])

    def test_unknown_location(self):
        handler, _, _, (bread, _, _) = _setup()
        with pytest.raises(NotFoundError, match="Location not found"):
            handler.handle("user-1", "nowhere", [ReservationItemSpec(bread.id, 1)])

    def test_archived_location(self):
        handler, store, location, (bread, _, _) = _setup()
        store.location(location.id).archive()
        with pytest.raises(NotFoundError, match="Location not found"):
            handler.handle("user-1", location.id, [ReservationItemSpec(bread.id, 1)])

    def test_negative_quantity(self):
        handler, _, location, (bread, _, _) = _setup()
        with pytest.raises(ValidationError, match="cannot be negative"):
            handler.handle("user-1", location.id, [ReservationItemSpec(bread.id, "-1")])

    def test_unknown_food_item(self):
        handler, _, location, _ = _setup()
        with pytest.raises(NotFoundError):
            handler.handle("user-1", location.id, [ReservationItemSpec("ghost", 1)])


class TestCreateReservationAtomicity:

    def test_storage_failure_on_third_item_rolls_everything_back(self):
        handler, store, location, (bread, soup, cake) = _setup()
        store.fail_on_item_write = 3

        with pytest.raises(StorageError):
            handler.handle("user-1", location.id, [
                ReservationItemSpec(bread.id, 1),
                ReservationItemSpec(soup.id, 1),
                ReservationItemSpec(cake.id, 1),
            ])

        assert store.tables["reservations"] == {}
        for item in (bread, soup, cake):
            saved = store.food_item(item.id)
            assert saved.available_quantity == saved.total_quantity

    def test_store_usable_after_failed_write(self):
        handler, store, location, (bread, soup, cake) = _setup()
        store.fail_on_item_write = 3
        specs = [
            ReservationItemSpec(bread.id, 1),
            ReservationItemSpec(soup.id, 1),
            ReservationItemSpec(cake.id, 1),
        ]
        with pytest.raises(StorageError):
            handler.handle("user-1", location.id, specs)

        store.fail_on_item_write = None
        dto = handler.handle("user-1", location.id, specs)
        assert len(dto.items) == 3
        assert store.food_item(cake.id).available_quantity.is_zero
