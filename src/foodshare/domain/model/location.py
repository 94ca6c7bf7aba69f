"""BusinessLocation aggregate.

A location belongs to one business and owns the pickup points where
reserved food is collected.  Food items hang off pickup points, so most
location-level rules need the food item and reservation repositories and
live in the inventory lifecycle service instead.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from foodshare.domain.exceptions import NotFoundError, ValidationError


@dataclass
class PickupPoint:
    id: str
    location_id: str
    name: str
    is_default: bool = False


@dataclass
class BusinessLocation:
    """Aggregate root for a physical business location."""

    id: str
    business_id: str
    name: str
    address: str
    pickup_points: list[PickupPoint]
    archived: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        business_id: str,
        name: str,
        address: str,
        pickup_point_names: list[str],
        default_index: int = 0,
    ) -> BusinessLocation:
        """Create a location with its pickup points; exactly one is default."""
        if not business_id:
            raise ValidationError("Business is required")
        if not name or not name.strip():
            raise ValidationError("Location name is required")
        if not address or not address.strip():
            raise ValidationError("Address is required")

        names = [n.strip() for n in pickup_point_names if n and n.strip()]
        if not names:
            raise ValidationError("A location needs at least one pickup point")
        if not 0 <= default_index < len(names):
            raise ValidationError(f"No pickup point at position {default_index}")

        location_id = str(uuid.uuid4())
        return BusinessLocation(
            id=location_id,
            business_id=business_id,
            name=name.strip(),
            address=address.strip(),
            pickup_points=[
                PickupPoint(
                    id=str(uuid.uuid4()),
                    location_id=location_id,
                    name=pp_name,
                    is_default=(i == default_index),
                )
                for i, pp_name in enumerate(names)
            ],
        )

    def default_pickup_point(self) -> PickupPoint:
        """The flagged default, else the first pickup point."""
        for pp in self.pickup_points:
            if pp.is_default:
                return pp
        if not self.pickup_points:
            raise NotFoundError(f"No pickup point found for location {self.name}")
        return self.pickup_points[0]

    def find_pickup_point(self, pickup_point_id: str) -> PickupPoint:
        for pp in self.pickup_points:
            if pp.id == pickup_point_id:
                return pp
        raise ValidationError(f"Invalid pickup point for location {self.name}")

    def pickup_point_ids(self) -> list[str]:
        return [pp.id for pp in self.pickup_points]

    def archive(self) -> None:
        self.archived = True
