"""JSON-document-backed implementation of ReservationRepository.

Reservations and their items live in two tables, like the relational
schema they mirror; ``save`` stages the reservation row and every item row
in the same unit of work.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from foodshare.domain.model.reservation import (
    Reservation,
    ReservationItem,
    ReservationStatus,
)
from foodshare.domain.model.value_objects import Quantity
from foodshare.domain.repository.reservation_repository import ReservationRepository
from foodshare.infrastructure.persistence.json_document_store import row_key

if TYPE_CHECKING:
    from foodshare.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

_TABLE = "reservations"
_ITEMS_TABLE = "reservation_items"


class JsonReservationRepository(ReservationRepository):

    def __init__(self, uow: JsonUnitOfWork) -> None:
        self._uow = uow

    # --- ReservationRepository interface --------------------------------------

    def get_by_id(self, reservation_id: str) -> Reservation | None:
        raw = self._uow.rows(_TABLE).get(reservation_id)
        if raw is None:
            return None
        return self._to_domain(raw, self._item_rows())

    def list_by_user(self, user_id: str) -> list[Reservation]:
        item_rows = self._item_rows()
        reservations = [
            self._to_domain(raw, item_rows)
            for raw in self._uow.rows(_TABLE).values()
            if raw["user_id"] == user_id
        ]
        reservations.sort(key=lambda r: r.created_at, reverse=True)
        return reservations

    def list_active(self) -> list[Reservation]:
        item_rows = self._item_rows()
        return [
            self._to_domain(raw, item_rows)
            for raw in self._uow.rows(_TABLE).values()
            if raw["status"] == ReservationStatus.ACTIVE.value
        ]

    def has_items_for(self, food_item_id: str) -> bool:
        return any(
            raw["food_item_id"] == food_item_id
            for raw in self._uow.rows(_ITEMS_TABLE).values()
        )

    def has_any_at_pickup_points(self, pickup_point_ids: list[str]) -> bool:
        wanted = set(pickup_point_ids)
        return any(
            raw["pickup_point_id"] in wanted for raw in self._uow.rows(_TABLE).values()
        )

    def save(self, reservation: Reservation) -> None:
        self._uow.stage(_TABLE, reservation.id, self._to_raw(reservation))
        for item in reservation.items:
            raw_item = self._item_to_raw(item)
            self._uow.stage(_ITEMS_TABLE, row_key(_ITEMS_TABLE, raw_item), raw_item)

    # --- Serialization --------------------------------------------------------

    def _item_rows(self) -> dict[str, list[dict]]:
        by_reservation: dict[str, list[dict]] = {}
        for raw in self._uow.rows(_ITEMS_TABLE).values():
            by_reservation.setdefault(raw["reservation_id"], []).append(raw)
        return by_reservation

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "user_id": reservation.user_id,
            "pickup_point_id": reservation.pickup_point_id,
            "status": reservation.status.value,
            "created_at": reservation.created_at.isoformat(),
            "expires_at": reservation.expires_at.isoformat(),  # type: ignore[union-attr]
        }

    @staticmethod
    def _item_to_raw(item: ReservationItem) -> dict:
        return {
            "reservation_id": item.reservation_id,
            "food_item_id": item.food_item_id,
            "quantity": str(item.quantity.amount),
        }

    @staticmethod
    def _to_domain(raw: dict, item_rows: dict[str, list[dict]]) -> Reservation:
        items = [
            ReservationItem(
                reservation_id=i["reservation_id"],
                food_item_id=i["food_item_id"],
                quantity=Quantity(Decimal(i["quantity"])),
            )
            for i in item_rows.get(raw["id"], [])
        ]
        return Reservation(
            id=raw["id"],
            user_id=raw["user_id"],
            pickup_point_id=raw["pickup_point_id"],
            items=items,
            status=ReservationStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            expires_at=datetime.fromisoformat(raw["expires_at"]),
        )
