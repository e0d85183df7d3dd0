"""Tests for address normalization and town-name disambiguation."""

import pytest

from fitfindr.core.geocoding.constants import AmbiguityRule
from fitfindr.core.geocoding.normalizer import AddressNormalizer, normalize_address
from tests.fixtures.geocoding import candidate

ALLEN = candidate(33.1032, -96.6706, "Allen, Collin County, Texas, United States")
MCALLEN = candidate(26.2034, -98.2300, "McAllen, Hidalgo County, Texas, United States")


class TestNormalizeAddress:
    def test_expands_street(self):
        assert normalize_address("123 Main St") == "123 Main Street"

    def test_keeps_words_containing_abbreviation(self):
        assert normalize_address("Stanley Ave") == "Stanley Avenue"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("5 Oak Blvd", "5 Oak Boulevard"),
            ("9 Elm Dr", "9 Elm Drive"),
            ("1 Ranch Rd", "1 Ranch Road"),
            ("2 Pine Ln", "2 Pine Lane"),
            ("3 Court Ct", "3 Court Court"),
            ("4 Market Pl", "4 Market Place"),
            ("6 Mopac Pkwy", "6 Mopac Parkway"),
            ("7 State Hwy 71", "7 State Highway 71"),
            ("8 Katy Fwy", "8 Katy Freeway"),
        ],
    )
    def test_expands_each_street_type(self, raw, expected):
        assert normalize_address(raw) == expected

    def test_case_insensitive(self):
        assert normalize_address("123 main st") == "123 main Street"

    def test_abbreviation_with_period(self):
        assert normalize_address("123 Main St.") == "123 Main Street."

    def test_multiple_abbreviations(self):
        assert (
            normalize_address("100 Congress Ave, Suite 5 St")
            == "100 Congress Avenue, Suite 5 Street"
        )

    def test_no_abbreviations_unchanged(self):
        assert normalize_address("Austin, TX") == "Austin, TX"

    def test_empty_and_none(self):
        assert normalize_address("") == ""
        assert normalize_address(None) == ""

    def test_words_starting_with_abbreviation_untouched(self):
        assert normalize_address("Driftwood Avenue") == "Driftwood Avenue"
        assert normalize_address("Stone Place") == "Stone Place"


class TestTriggeredRules:
    @pytest.fixture
    def normalizer(self):
        return AddressNormalizer()

    @pytest.mark.parametrize(
        "query",
        ["Allen, TX", "allen,tx", "Allen , Texas", "123 Main Street, Allen, TX 75013"],
    )
    def test_allen_texas_triggers(self, normalizer, query):
        rules = normalizer.triggered_rules(query)
        assert [rule.target for rule in rules] == ["allen"]

    @pytest.mark.parametrize(
        "query",
        ["McAllen, TX", "Allen, OK", "Allentown, PA", "Allen", "", None],
    )
    def test_other_queries_do_not_trigger(self, normalizer, query):
        assert normalizer.triggered_rules(query) == []

    def test_custom_rules(self):
        rule = AmbiguityRule(
            target="paris", colliding="paris, france", state_tokens=("TX", "Texas")
        )
        normalizer = AddressNormalizer(rules=[rule])

        assert normalizer.triggered_rules("Paris, TX") == [rule]
        assert normalizer.triggered_rules("Allen, TX") == []

    def test_normalize_delegates(self, normalizer):
        assert normalizer.normalize("1 Main St") == "1 Main Street"


class TestFilterCandidates:
    @pytest.fixture
    def normalizer(self):
        return AddressNormalizer()

    def test_keeps_only_target_town(self, normalizer):
        rules = normalizer.triggered_rules("Allen, TX")

        filtered = normalizer.filter_candidates([MCALLEN, ALLEN], rules)

        assert filtered == [ALLEN]

    def test_falls_back_when_nothing_survives(self, normalizer):
        rules = normalizer.triggered_rules("Allen, TX")

        filtered = normalizer.filter_candidates([MCALLEN], rules)

        assert filtered == [MCALLEN]

    def test_no_rules_returns_candidates_unchanged(self, normalizer):
        assert normalizer.filter_candidates([MCALLEN, ALLEN], []) == [MCALLEN, ALLEN]

    def test_candidate_without_display_name_is_dropped(self, normalizer):
        rules = normalizer.triggered_rules("Allen, TX")
        nameless = {"lat": "1", "lon": "2"}

        assert normalizer.filter_candidates([nameless, ALLEN], rules) == [ALLEN]
