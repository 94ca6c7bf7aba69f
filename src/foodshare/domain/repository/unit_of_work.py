"""Abstract unit of work: the transactional boundary of the core.

Every mutation that spans more than one row (a reservation, its items and
the ledger updates they cause) is staged through one UnitOfWork and becomes
visible only on ``commit()``.  Leaving the ``with`` block without committing,
or because of an exception, discards everything that was staged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from foodshare.domain.repository.food_item_repository import FoodItemRepository
from foodshare.domain.repository.location_repository import LocationRepository
from foodshare.domain.repository.reservation_repository import ReservationRepository


class UnitOfWork(ABC):

    food_items: FoodItemRepository
    reservations: ReservationRepository
    locations: LocationRepository

    def __enter__(self) -> UnitOfWork:
        self._committed = False
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._committed:
            self.rollback()

    def commit(self) -> None:
        self._commit()
        self._committed = True

    @abstractmethod
    def rollback(self) -> None:
        """Discard everything staged since the unit of work began."""

    @abstractmethod
    def _begin(self) -> None:
        """Take a fresh snapshot to read from and start staging writes."""

    @abstractmethod
    def _commit(self) -> None:
        """Make all staged writes visible at once, or none of them."""
