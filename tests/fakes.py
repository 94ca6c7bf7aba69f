"""In-memory fakes for testing.

``FakeStore`` holds the committed state; every ``FakeUnitOfWork`` reads a
deep copy of it and only writes back on ``commit()``, so tests see the same
all-or-nothing behaviour as the JSON store.  No file I/O, no side effects.
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime, timedelta, timezone

from foodshare.domain.clock import Clock
from foodshare.domain.exceptions import StorageError
from foodshare.domain.model.food_item import FoodItem
from foodshare.domain.model.location import BusinessLocation
from foodshare.domain.model.reservation import Reservation, ReservationStatus
from foodshare.domain.model.value_objects import Quantity
from foodshare.domain.repository.food_item_repository import FoodItemRepository
from foodshare.domain.repository.location_repository import LocationRepository
from foodshare.domain.repository.reservation_repository import ReservationRepository
from foodshare.domain.repository.unit_of_work import UnitOfWork

_TABLES = ("food_items", "reservations", "locations")


class FakeClock(Clock):

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now += timedelta(**kwargs)


class FakeStore:
    """Committed rows, keyed by table then ID.

    ``fail_on_item_write`` makes the Nth reservation item written inside a
    unit of work raise StorageError, to exercise partial-write rollback.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.tables: dict[str, dict] = {table: {} for table in _TABLES}
        self.fail_on_item_write: int | None = None
        self.commits = 0

    def seed(self, *entities) -> None:
        for entity in entities:
            if isinstance(entity, FoodItem):
                self.tables["food_items"][entity.id] = copy.deepcopy(entity)
            elif isinstance(entity, Reservation):
                self.tables["reservations"][entity.id] = copy.deepcopy(entity)
            elif isinstance(entity, BusinessLocation):
                self.tables["locations"][entity.id] = copy.deepcopy(entity)
            else:
                raise TypeError(f"Cannot seed {type(entity).__name__}")

    def food_item(self, food_item_id: str) -> FoodItem | None:
        return self.tables["food_items"].get(food_item_id)

    def reservation(self, reservation_id: str) -> Reservation | None:
        return self.tables["reservations"].get(reservation_id)

    def location(self, location_id: str) -> BusinessLocation | None:
        return self.tables["locations"].get(location_id)

    def uow_factory(self):
        return lambda: FakeUnitOfWork(self)


class _FakeTable:

    def __init__(self, uow: FakeUnitOfWork, table: str) -> None:
        self._uow = uow
        self._table = table

    def _rows(self) -> dict:
        return self._uow.working[self._table]

    def _put(self, key: str, entity) -> None:
        self._rows()[key] = copy.deepcopy(entity)
        self._uow.dirty[self._table].add(key)

    def _drop(self, key: str) -> None:
        self._rows().pop(key, None)
        self._uow.dirty[self._table].add(key)

    def _get(self, key: str):
        entity = self._rows().get(key)
        return copy.deepcopy(entity) if entity is not None else None

    def _all(self) -> list:
        return [copy.deepcopy(e) for e in self._rows().values()]


class FakeFoodItemRepository(_FakeTable, FoodItemRepository):

    def __init__(self, uow: FakeUnitOfWork) -> None:
        super().__init__(uow, "food_items")

    def get_by_id(self, food_item_id: str) -> FoodItem | None:
        return self._get(food_item_id)

    def list_by_pickup_points(
        self,
        pickup_point_ids: list[str],
        include_archived: bool = False,
    ) -> list[FoodItem]:
        return [
            item
            for item in self._all()
            if item.pickup_point_id in pickup_point_ids
            and (include_archived or not item.archived)
        ]

    def save(self, item: FoodItem) -> None:
        self._put(item.id, item)

    def delete(self, food_item_id: str) -> None:
        self._drop(food_item_id)


class FakeReservationRepository(_FakeTable, ReservationRepository):

    def __init__(self, uow: FakeUnitOfWork) -> None:
        super().__init__(uow, "reservations")
        self._items_written = 0

    def get_by_id(self, reservation_id: str) -> Reservation | None:
        return self._get(reservation_id)

    def list_by_user(self, user_id: str) -> list[Reservation]:
        found = [r for r in self._all() if r.user_id == user_id]
        found.sort(key=lambda r: r.created_at, reverse=True)
        return found

    def list_active(self) -> list[Reservation]:
        return [r for r in self._all() if r.status == ReservationStatus.ACTIVE]

    def has_items_for(self, food_item_id: str) -> bool:
        return any(food_item_id in r.food_item_ids() for r in self._all())

    def has_any_at_pickup_points(self, pickup_point_ids: list[str]) -> bool:
        return any(r.pickup_point_id in pickup_point_ids for r in self._all())

    def save(self, reservation: Reservation) -> None:
        fail_on = self._uow.store.fail_on_item_write
        for _ in reservation.items:
            self._items_written += 1
            if fail_on is not None and self._items_written == fail_on:
                raise StorageError("Simulated failure writing reservation item")
        self._put(reservation.id, reservation)


class FakeLocationRepository(_FakeTable, LocationRepository):

    def __init__(self, uow: FakeUnitOfWork) -> None:
        super().__init__(uow, "locations")

    def get_by_id(self, location_id: str) -> BusinessLocation | None:
        return self._get(location_id)

    def get_by_pickup_point_id(self, pickup_point_id: str) -> BusinessLocation | None:
        for location in self._all():
            if pickup_point_id in location.pickup_point_ids():
                return location
        return None

    def list_by_business(self, business_id: str) -> list[BusinessLocation]:
        found = [loc for loc in self._all() if loc.business_id == business_id]
        found.sort(key=lambda loc: loc.created_at, reverse=True)
        return found

    def save(self, location: BusinessLocation) -> None:
        self._put(location.id, location)

    def delete(self, location_id: str) -> None:
        self._drop(location_id)


class FakeUnitOfWork(UnitOfWork):

    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.working: dict[str, dict] = {table: {} for table in _TABLES}
        self.dirty: dict[str, set[str]] = {table: set() for table in _TABLES}
        self.food_items = FakeFoodItemRepository(self)
        self.reservations = FakeReservationRepository(self)
        self.locations = FakeLocationRepository(self)

    def _begin(self) -> None:
        with self.store.lock:
            self.working = copy.deepcopy(self.store.tables)
        self.dirty = {table: set() for table in _TABLES}

    def _commit(self) -> None:
        with self.store.lock:
            for table, keys in self.dirty.items():
                for key in keys:
                    if key in self.working[table]:
                        self.store.tables[table][key] = copy.deepcopy(self.working[table][key])
                    else:
                        self.store.tables[table].pop(key, None)
            self.store.commits += 1
        self.dirty = {table: set() for table in _TABLES}

    def rollback(self) -> None:
        self.dirty = {table: set() for table in _TABLES}


# --- Builders -----------------------------------------------------------------


def make_location(business_id: str = "biz-1", pickup_points: int = 1) -> BusinessLocation:
    return BusinessLocation.create(
        business_id=business_id,
        name="Corner Bakery",
        address="1 Main St",
        pickup_point_names=[f"Counter {i + 1}" for i in range(pickup_points)],
    )


def make_food_item(
    location: BusinessLocation,
    total: str = "10",
    description: str = "Bread",
    unit_label: str = "loaves",
) -> FoodItem:
    return FoodItem.create(
        pickup_point_id=location.default_pickup_point().id,
        description=description,
        unit_label=unit_label,
        total_quantity=Quantity.of(total),
    )
