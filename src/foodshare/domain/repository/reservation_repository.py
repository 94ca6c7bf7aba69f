"""Abstract repository for Reservation aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from foodshare.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_id(self, reservation_id: str) -> Reservation | None:
        """Return a reservation (with its items) by ID, or None."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Reservation]:
        """Return every reservation of a user, newest first."""

    @abstractmethod
    def list_active(self) -> list[Reservation]:
        """Return every reservation still in the active status."""

    @abstractmethod
    def has_items_for(self, food_item_id: str) -> bool:
        """True if any reservation, in any status, ever held this food item."""

    @abstractmethod
    def has_any_at_pickup_points(self, pickup_point_ids: list[str]) -> bool:
        """True if any reservation, in any status, was made at these points."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a reservation row together with its item rows."""
