"""Application service: Add Location use case."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from foodshare.application.dto import LocationDTO, location_to_dto
from foodshare.domain.model.location import BusinessLocation
from foodshare.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class AddLocationHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        business_id: str,
        name: str,
        address: str,
        pickup_point_names: list[str],
        default_index: int = 0,
    ) -> LocationDTO:
        """Register a location together with its pickup points.

        Geocoding the address happens upstream; the address is stored as given.
        """
        location = BusinessLocation.create(
            business_id=business_id,
            name=name,
            address=address,
            pickup_point_names=pickup_point_names,
            default_index=default_index,
        )

        with self._uow_factory() as uow:
            uow.locations.save(location)
            uow.commit()

        logger.info("location_added", location_id=location.id, business_id=business_id)
        return location_to_dto(location)
