"""Application service: List Locations use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from foodshare.application.dto import LocationDTO, location_to_dto
from foodshare.domain.repository.unit_of_work import UnitOfWork


class ListLocationsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, business_id: str, include_archived: bool = False) -> list[LocationDTO]:
        with self._uow_factory() as uow:
            locations = uow.locations.list_by_business(business_id)
        return [
            location_to_dto(location)
            for location in locations
            if include_archived or not location.archived
        ]
