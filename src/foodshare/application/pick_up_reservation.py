"""Application service: Pick Up Reservation use case.

Called by the business when the user collects their food.  The held
quantities are booked as consumed: they leave ``total`` and ``reserved``
while ``available`` is left exactly as it was.

This is a deliberate ledger change on pickup.  Leaving ``total`` untouched
would keep the collected food counted as reserved with no active
reservation holding it, so the reserved amount would no longer equal the
sum of active holds.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from foodshare.application.dto import ReservationDTO, reservation_to_dto
from foodshare.application.expire_reservations import (
    expire_if_overdue,
    lock_keys_for,
)
from foodshare.application.locks import KeyedLocks
from foodshare.domain.clock import Clock
from foodshare.domain.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
)
from foodshare.domain.repository.unit_of_work import UnitOfWork
from foodshare.domain.service.reservation_ledger_service import (
    ReservationLedgerService,
)

logger = structlog.get_logger(__name__)


class PickUpReservationHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._clock = clock

    def handle(self, reservation_id: str, business_id: str) -> ReservationDTO:
        now = self._clock.now()

        with self._uow_factory() as uow:
            reservation = uow.reservations.get_by_id(reservation_id)
            if reservation is None:
                raise NotFoundError("Reservation not found")
            location = uow.locations.get_by_pickup_point_id(reservation.pickup_point_id)
        if location is None or location.business_id != business_id:
            raise AuthorizationError(
                "You do not have permission to hand out this reservation"
            )

        expired = False
        with self._locks.hold(lock_keys_for(reservation)):
            with self._uow_factory() as uow:
                reservation = uow.reservations.get_by_id(reservation_id)
                if reservation is None:
                    raise NotFoundError("Reservation not found")

                if expire_if_overdue(uow, reservation, now):
                    uow.commit()
                    expired = True
                else:
                    reservation.mark_picked_up()
                    ReservationLedgerService(uow.food_items).consume_for_reservation(
                        reservation
                    )
                    uow.reservations.save(reservation)
                    dto = reservation_to_dto(reservation, uow.food_items.get_by_id)
                    uow.commit()

        if expired:
            logger.info("reservation_expired", reservation_id=reservation_id)
            raise InvalidTransitionError(
                "Cannot pick up an expired reservation. "
                "Only active reservations can be changed."
            )

        logger.info("reservation_picked_up", reservation_id=reservation_id)
        return dto
