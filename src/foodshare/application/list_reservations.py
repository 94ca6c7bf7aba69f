"""Application service: List Reservations use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from foodshare.application.dto import ReservationDTO, reservation_to_dto
from foodshare.application.expire_reservations import ExpireReservationsHandler
from foodshare.application.locks import KeyedLocks
from foodshare.domain.clock import Clock
from foodshare.domain.repository.unit_of_work import UnitOfWork


class ListReservationsHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._clock = clock

    def handle(self, user_id: str) -> list[ReservationDTO]:
        """The user's reservations, newest first, with overdue ones expired."""
        ExpireReservationsHandler(self._uow_factory, self._locks, self._clock).handle(
            user_id=user_id
        )

        with self._uow_factory() as uow:
            return [
                reservation_to_dto(r, uow.food_items.get_by_id)
                for r in uow.reservations.list_by_user(user_id)
            ]
