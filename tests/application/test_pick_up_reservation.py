"""Integration tests for the PickUpReservation use case."""

import pytest

from foodshare.application.create_reservation import CreateReservationHandler
from foodshare.application.dto import ReservationItemSpec
from foodshare.application.locks import KeyedLocks
from foodshare.application.pick_up_reservation import PickUpReservationHandler
from foodshare.domain.exceptions import AuthorizationError, InvalidTransitionError
from foodshare.domain.model.reservation import ReservationStatus
from foodshare.domain.model.value_objects import Quantity
from tests.fakes import FakeClock, FakeStore, make_food_item, make_location


def _setup():
    location = make_location(business_id="biz-1")
    bread = make_food_item(location, total="10")
    store = FakeStore()
    store.seed(location, bread)
    locks, clock = KeyedLocks(), FakeClock()
    create = CreateReservationHandler(store.uow_factory(), locks, clock)
    pickup = PickUpReservationHandler(store.uow_factory(), locks, clock)
    dto = create.handle("user-1", location.id, [ReservationItemSpec(bread.id, "4")])
    return pickup, store, clock, bread, dto.id


class TestPickUpReservation:

    def test_pick_up_consumes_hold(self):
        pickup, store, _, bread, reservation_id = _setup()
        dto = pickup.handle(reservation_id, "biz-1")

        assert dto.status == "picked_up"
        item = store.food_item(bread.id)
        assert item.total_quantity == Quantity.of("6")
        assert item.available_quantity == Quantity.of("6")
        assert item.reserved_quantity.is_zero

    def test_other_business_cannot_hand_out(self):
        pickup, store, _, _, reservation_id = _setup()
        with pytest.raises(AuthorizationError):
            pickup.handle(reservation_id, "biz-2")
        assert store.reservation(reservation_id).status == ReservationStatus.ACTIVE

    def test_pick_up_twice_rejected(self):
        pickup, store, _, bread, reservation_id = _setup()
        pickup.handle(reservation_id, "biz-1")
        with pytest.raises(InvalidTransitionError):
            pickup.handle(reservation_id, "biz-1")
        assert store.food_item(bread.id).total_quantity == Quantity.of("6")

    def test_pick_up_after_ttl_rejected(self):
        pickup, store, clock, bread, reservation_id = _setup()
        clock.advance(days=1, seconds=1)
        with pytest.raises(InvalidTransitionError, match="expired reservation"):
            pickup.handle(reservation_id, "biz-1")
        assert store.reservation(reservation_id).status == ReservationStatus.EXPIRED
        item = store.food_item(bread.id)
        assert item.total_quantity == Quantity.of("10")
        assert item.available_quantity == Quantity.of("10")
