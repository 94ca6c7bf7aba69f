"""Application service: Expire Reservations use case.

Reservations hold stock for 24 hours.  Expiry is applied through this one
code path: by the periodic sweep (``reservation sweep``), and lazily by the
create / cancel / pick-up / list handlers before they act, so an overdue
hold never blocks stock it no longer legitimately holds.

The status check and the ledger release happen in the same unit of work
while the reservation's lock is held, so a racing cancel and expiry can
never both release.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from foodshare.application.locks import KeyedLocks, food_item_key, reservation_key
from foodshare.domain.clock import Clock
from foodshare.domain.model.reservation import Reservation
from foodshare.domain.repository.unit_of_work import UnitOfWork
from foodshare.domain.service.reservation_ledger_service import (
    ReservationLedgerService,
)

logger = structlog.get_logger(__name__)


def lock_keys_for(reservation: Reservation) -> list[str]:
    """The reservation itself plus every food item it holds."""
    return [reservation_key(reservation.id)] + [
        food_item_key(fid) for fid in reservation.food_item_ids()
    ]


def expire_if_overdue(uow: UnitOfWork, reservation: Reservation, now: datetime) -> bool:
    """Expire *reservation* and release its holds if its TTL has run out.

    Must be called with the reservation's locks held.  Returns False (and
    changes nothing) when the reservation is not active or not yet due.
    """
    if not reservation.is_overdue(now):
        return False
    reservation.expire(now)
    ReservationLedgerService(uow.food_items).release_for_reservation(reservation)
    uow.reservations.save(reservation)
    return True


class ExpireReservationsHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._clock = clock

    def handle(
        self,
        user_id: str | None = None,
        food_item_ids: set[str] | None = None,
    ) -> list[str]:
        """Expire every overdue active reservation, optionally filtered.

        Each reservation is expired in its own unit of work; re-running the
        sweep is harmless.  Returns the IDs that were expired by this call.
        """
        now = self._clock.now()

        with self._uow_factory() as uow:
            candidates = [
                r
                for r in uow.reservations.list_active()
                if r.is_overdue(now)
                and (user_id is None or r.user_id == user_id)
                and (food_item_ids is None or food_item_ids & set(r.food_item_ids()))
            ]

        expired: list[str] = []
        for candidate in candidates:
            with self._locks.hold(lock_keys_for(candidate)):
                with self._uow_factory() as uow:
                    # Re-read under the lock: a cancel may have won the race.
                    reservation = uow.reservations.get_by_id(candidate.id)
                    if reservation is None or not expire_if_overdue(uow, reservation, now):
                        continue
                    uow.commit()
            expired.append(candidate.id)
            logger.info(
                "reservation_expired",
                reservation_id=candidate.id,
                user_id=candidate.user_id,
            )

        return expired
