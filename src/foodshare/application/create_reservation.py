"""Application service: Create Reservation use case.

This is the transactional boundary for a new reservation: the Reservation
row, all of its ReservationItem rows and every ledger decrement are staged
in one unit of work and committed together, or not at all.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from foodshare.application.dto import (
    ReservationDTO,
    ReservationItemSpec,
    reservation_to_dto,
)
from foodshare.application.expire_reservations import (
    expire_if_overdue,
    lock_keys_for,
)
from foodshare.application.locks import KeyedLocks, food_item_key, location_key
from foodshare.domain.clock import Clock
from foodshare.domain.exceptions import NotFoundError, ValidationError
from foodshare.domain.model.reservation import Reservation
from foodshare.domain.model.value_objects import Quantity
from foodshare.domain.repository.unit_of_work import UnitOfWork
from foodshare.domain.service.reservation_ledger_service import (
    ReservationLedgerService,
)

logger = structlog.get_logger(__name__)


class CreateReservationHandler:

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
        user_id: str,
        location_id: str,
        item_specs: list[ReservationItemSpec],
    ) -> ReservationDTO:
        """Reserve food at a location for pickup.

        Steps:
        1. Parse quantities (fail before taking any lock).
        2. Lock the location and every requested food item, plus any
           overdue reservation still holding one of them.
        3. Expire those overdue holds so they stop blocking stock.
        4. Resolve the pickup point (default, else first), build the
           reservation and reserve every line in the ledger.
        5. Commit everything as one unit.
        """
        if not location_id or not item_specs:
            raise ValidationError("Location ID and items are required")

        lines = [
            (spec.food_item_id, Quantity.of(spec.quantity)) for spec in item_specs
        ]
        food_item_ids = {food_item_id for food_item_id, _ in lines}
        now = self._clock.now()

        with self._uow_factory() as uow:
            stale = [
                r
                for r in uow.reservations.list_active()
                if r.is_overdue(now) and food_item_ids & set(r.food_item_ids())
            ]

        keys = [location_key(location_id)]
        keys += [food_item_key(fid) for fid in food_item_ids]
        for reservation in stale:
            keys += lock_keys_for(reservation)

        with self._locks.hold(keys):
            if stale:
                self._expire_stale(stale, now)

            with self._uow_factory() as uow:
                location = uow.locations.get_by_id(location_id)
                if location is None or location.archived:
                    raise NotFoundError("Location not found")
                pickup_point = location.default_pickup_point()

                reservation = Reservation.create(
                    user_id=user_id,
                    pickup_point_id=pickup_point.id,
                    lines=lines,
                    now=now,
                )

                ledger = ReservationLedgerService(uow.food_items)
                ledger.reserve_for_reservation(reservation, location.pickup_point_ids())
                uow.reservations.save(reservation)

                dto = reservation_to_dto(reservation, uow.food_items.get_by_id)
                uow.commit()

        logger.info(
            "reservation_created",
            reservation_id=reservation.id,
            user_id=user_id,
            location_id=location_id,
            items=len(reservation.items),
        )
        return dto

    def _expire_stale(self, stale: list[Reservation], now: datetime) -> None:
        with self._uow_factory() as uow:
            for candidate in stale:
                reservation = uow.reservations.get_by_id(candidate.id)
                if reservation is not None and expire_if_overdue(uow, reservation, now):
                    logger.info("reservation_expired", reservation_id=reservation.id)
            uow.commit()

