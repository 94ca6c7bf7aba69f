"""Unit tests for the BusinessLocation aggregate."""

import pytest

from foodshare.domain.exceptions import NotFoundError, ValidationError
from foodshare.domain.model.location import BusinessLocation


def _location(names=("Front", "Back"), default_index=0) -> BusinessLocation:
    return BusinessLocation.create(
        business_id="biz-1",
        name="Corner Bakery",
        address="1 Main St",
        pickup_point_names=list(names),
        default_index=default_index,
    )


class TestLocationCreate:

    def test_pickup_points_belong_to_location(self):
        loc = _location()
        assert [pp.name for pp in loc.pickup_points] == ["Front", "Back"]
        assert {pp.location_id for pp in loc.pickup_points} == {loc.id}

    def test_exactly_one_default(self):
        loc = _location(default_index=1)
        assert [pp.is_default for pp in loc.pickup_points] == [False, True]

    def test_pickup_point_required(self):
        with pytest.raises(ValidationError, match="at least one pickup point"):
            _location(names=["  "])

    def test_default_index_out_of_range(self):
        with pytest.raises(ValidationError, match="position 2"):
            _location(default_index=2)

    def test_name_required(self):
        with pytest.raises(ValidationError, match="name is required"):
            BusinessLocation.create("biz-1", "", "1 Main St", ["Front"])


class TestPickupPointResolution:

    def test_default_is_flagged_point(self):
        loc = _location(default_index=1)
        assert loc.default_pickup_point().name == "Back"

    def test_falls_back_to_first(self):
        loc = _location()
        for pp in loc.pickup_points:
            pp.is_default = False
        assert loc.default_pickup_point().name == "Front"

    def test_no_pickup_points(self):
        loc = _location()
        loc.pickup_points = []
        with pytest.raises(NotFoundError, match="No pickup point"):
            loc.default_pickup_point()

    def test_find_foreign_pickup_point_rejected(self):
        with pytest.raises(ValidationError, match="Invalid pickup point"):
            _location().find_pickup_point("elsewhere")
