"""Abstract repository for BusinessLocation aggregate (with pickup points)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from foodshare.domain.model.location import BusinessLocation


class LocationRepository(ABC):

    @abstractmethod
    def get_by_id(self, location_id: str) -> BusinessLocation | None:
        """Return a location by its ID, or None if not found."""

    @abstractmethod
    def get_by_pickup_point_id(self, pickup_point_id: str) -> BusinessLocation | None:
        """Return the location owning a pickup point, or None."""

    @abstractmethod
    def list_by_business(self, business_id: str) -> list[BusinessLocation]:
        """Return every location of a business, newest first."""

    @abstractmethod
    def save(self, location: BusinessLocation) -> None:
        """Persist a new or updated location and its pickup points."""

    @abstractmethod
    def delete(self, location_id: str) -> None:
        """Permanently remove a location and its pickup points."""
