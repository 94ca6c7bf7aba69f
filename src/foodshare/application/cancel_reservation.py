"""Application service: Cancel Reservation use case.

Only the owner may cancel, and only while the reservation is active.  The
status change and the release of every held quantity are committed
together.  An active reservation that is already past its TTL is expired
instead, and the cancel is refused.
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


class CancelReservationHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._clock = clock

    def handle(self, reservation_id: str, requesting_user_id: str) -> ReservationDTO:
        now = self._clock.now()

        with self._uow_factory() as uow:
            reservation = uow.reservations.get_by_id(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation not found")
        if reservation.user_id != requesting_user_id:
            raise AuthorizationError(
                "You do not have permission to cancel this reservation"
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
                    # Raises InvalidTransitionError unless still active.
                    reservation.cancel()
                    ReservationLedgerService(uow.food_items).release_for_reservation(
                        reservation
                    )
                    uow.reservations.save(reservation)
                    dto = reservation_to_dto(reservation, uow.food_items.get_by_id)
                    uow.commit()

        if expired:
            logger.info("reservation_expired", reservation_id=reservation_id)
            raise InvalidTransitionError(
                "Cannot cancel an expired reservation. "
                "Only active reservations can be changed."
            )

        logger.info(
            "reservation_canceled",
            reservation_id=reservation_id,
            user_id=requesting_user_id,
        )
        return dto
