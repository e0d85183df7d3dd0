"""Tests for haversine distance and radius filtering."""

import math
from types import SimpleNamespace

import pytest

from fitfindr.core.geocoding.distance import (
    distance_miles,
    entity_coordinates,
    filter_by_proximity,
)

AUSTIN = (30.2672, -97.7431)
DALLAS = (32.7767, -96.7970)

# Points due north of the equator origin; one degree of latitude is
# 3959 * pi / 180 miles, about 69.1 miles.
MILES_PER_DEGREE = 3959.0 * math.pi / 180


def north_of_origin(miles: float) -> dict[str, float]:
    return {"latitude": miles / MILES_PER_DEGREE, "longitude": 0.0}


class TestDistanceMiles:
    def test_same_point_is_zero(self):
        assert distance_miles(*AUSTIN, *AUSTIN) == 0

    def test_symmetric(self):
        assert distance_miles(*AUSTIN, *DALLAS) == pytest.approx(
            distance_miles(*DALLAS, *AUSTIN)
        )

    def test_austin_to_dallas(self):
        # Roughly 182 miles as the crow flies
        assert distance_miles(*AUSTIN, *DALLAS) == pytest.approx(182, abs=3)

    def test_quarter_circumference(self):
        """Pole to equator is a quarter of the great circle."""
        assert distance_miles(90, 0, 0, 0) == pytest.approx(3959.0 * math.pi / 2)

    def test_antipodal_points(self):
        assert distance_miles(0, 0, 0, 180) == pytest.approx(3959.0 * math.pi)

    def test_non_finite_input_yields_nan(self):
        assert math.isnan(distance_miles(float("nan"), 0, 0, 0))


class TestEntityCoordinates:
    def test_reads_mapping(self):
        assert entity_coordinates({"latitude": 1.0, "longitude": 2.0}) == (1.0, 2.0)

    def test_reads_attributes(self):
        entity = SimpleNamespace(latitude=1.0, longitude=2.0)
        assert entity_coordinates(entity) == (1.0, 2.0)

    def test_missing_fields_are_none(self):
        assert entity_coordinates({}) == (None, None)
        assert entity_coordinates(object()) == (None, None)


class TestFilterByProximity:
    def test_keeps_entities_within_radius_nearest_first(self):
        far = {"name": "far", **north_of_origin(40)}
        near = {"name": "near", **north_of_origin(2)}
        mid = {"name": "mid", **north_of_origin(10)}

        matches = filter_by_proximity([far, mid, near], 0.0, 0.0, 25)

        assert [match.entity["name"] for match in matches] == ["near", "mid"]
        assert matches[0].distance == pytest.approx(2)
        assert matches[1].distance == pytest.approx(10)

    def test_results_within_radius_and_sorted(self):
        entities = [north_of_origin(miles) for miles in (30, 1, 24, 5, 26, 12)]

        matches = filter_by_proximity(entities, 0.0, 0.0, 25)

        distances = [match.distance for match in matches]
        assert all(distance <= 25 for distance in distances)
        assert distances == sorted(distances)
        assert len(matches) == 4

    def test_skips_entities_without_coordinates(self):
        entities = [
            {"name": "no lat", "latitude": None, "longitude": 0.0},
            {"name": "no lon", "latitude": 0.0, "longitude": None},
            {"name": "nothing"},
            {"name": "nan", "latitude": float("nan"), "longitude": 0.0},
            {"name": "origin", "latitude": 0.0, "longitude": 0.0},
        ]

        matches = filter_by_proximity(entities, 0.0, 0.0, 5)

        assert [match.entity["name"] for match in matches] == ["origin"]

    def test_zero_coordinates_are_kept(self):
        matches = filter_by_proximity([{"latitude": 0, "longitude": 0}], 0, 0, 5)
        assert len(matches) == 1
        assert matches[0].distance == 0

    def test_boundary_is_inclusive(self):
        entity = {"latitude": 0.0, "longitude": 0.0}
        exact = distance_miles(1.0, 0.0, 0.0, 0.0)

        matches = filter_by_proximity([entity], 1.0, 0.0, exact)

        assert len(matches) == 1

    def test_ties_keep_input_order(self):
        entities = [
            {"id": index, "latitude": 0.0, "longitude": 0.0} for index in range(5)
        ]

        matches = filter_by_proximity(entities, 0.0, 0.0, 5)

        assert [match.entity["id"] for match in matches] == [0, 1, 2, 3, 4]

    def test_empty_input(self):
        assert filter_by_proximity([], 0.0, 0.0, 25) == []

    def test_numeric_strings_are_accepted(self):
        matches = filter_by_proximity(
            [{"latitude": "30.2672", "longitude": "-97.7431"}], *AUSTIN, 5
        )
        assert len(matches) == 1

    def test_custom_coordinate_getter(self):
        venue = SimpleNamespace(latitude=AUSTIN[0], longitude=AUSTIN[1])
        event = SimpleNamespace(title="Run club", location=venue)

        matches = filter_by_proximity(
            [event],
            *AUSTIN,
            5,
            coordinates=lambda e: (e.location.latitude, e.location.longitude),
        )

        assert matches[0].entity is event

    def test_default_radius_is_25_miles(self):
        entities = [north_of_origin(20), north_of_origin(30)]
        assert len(filter_by_proximity(entities, 0.0, 0.0)) == 1
