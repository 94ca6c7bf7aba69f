"""JSON-document-backed implementation of LocationRepository.

Pickup points are owned by their location and stored inside its row.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from foodshare.domain.model.location import BusinessLocation, PickupPoint
from foodshare.domain.repository.location_repository import LocationRepository

if TYPE_CHECKING:
    from foodshare.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

_TABLE = "locations"


class JsonLocationRepository(LocationRepository):

    def __init__(self, uow: JsonUnitOfWork) -> None:
        self._uow = uow

    # --- LocationRepository interface -----------------------------------------

    def get_by_id(self, location_id: str) -> BusinessLocation | None:
        raw = self._uow.rows(_TABLE).get(location_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_pickup_point_id(self, pickup_point_id: str) -> BusinessLocation | None:
        for raw in self._uow.rows(_TABLE).values():
            if any(pp["id"] == pickup_point_id for pp in raw["pickup_points"]):
                return self._to_domain(raw)
        return None

    def list_by_business(self, business_id: str) -> list[BusinessLocation]:
        locations = [
            self._to_domain(raw)
            for raw in self._uow.rows(_TABLE).values()
            if raw["business_id"] == business_id
        ]
        locations.sort(key=lambda loc: loc.created_at, reverse=True)
        return locations

    def save(self, location: BusinessLocation) -> None:
        self._uow.stage(_TABLE, location.id, self._to_raw(location))

    def delete(self, location_id: str) -> None:
        self._uow.stage(_TABLE, location_id, None)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(location: BusinessLocation) -> dict:
        return {
            "id": location.id,
            "business_id": location.business_id,
            "name": location.name,
            "address": location.address,
            "archived": location.archived,
            "created_at": location.created_at.isoformat(),
            "pickup_points": [
                {"id": pp.id, "name": pp.name, "is_default": pp.is_default}
                for pp in location.pickup_points
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> BusinessLocation:
        return BusinessLocation(
            id=raw["id"],
            business_id=raw["business_id"],
            name=raw["name"],
            address=raw["address"],
            pickup_points=[
                PickupPoint(
                    id=pp["id"],
                    location_id=raw["id"],
                    name=pp["name"],
                    is_default=pp.get("is_default", False),
                )
                for pp in raw["pickup_points"]
            ],
            archived=raw.get("archived", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
