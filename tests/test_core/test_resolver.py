"""Tests for multi-format address resolution."""

import pytest

from fitfindr.core.geocoding.resolver import (
    ADDRESS_FORMATS,
    ALL_FORMATS_FAILED_REASON,
    NO_COMPONENTS_REASON,
    AddressResolver,
    PacingPolicy,
    build_address_candidates,
)
from fitfindr.models.geocoding import AddressRecord, GeocodeFailure, GeocodeSuccess
from tests.fixtures.geocoding import AUSTIN, DALLAS, ROUND_ROCK, RecordingSleep

CONGRESS = AddressRecord(
    line1="100 Congress Ave",
    line2="Suite 200",
    city="Austin",
    state="TX",
    postal_code="78701",
    country="USA",
)

CONGRESS_CANDIDATES = [
    "100 Congress Ave, Suite 200, Austin, TX, 78701, USA",
    "100 Congress Ave, Austin, TX, 78701, USA",
    "Austin, TX, 78701",
    "Austin, TX",
]


class TestBuildAddressCandidates:
    def test_all_formats_most_specific_first(self):
        assert build_address_candidates(CONGRESS) == CONGRESS_CANDIDATES

    def test_blank_components_are_dropped(self):
        address = AddressRecord(
            line1="  1 Main St ", line2="   ", city="Allen", state="TX"
        )

        assert build_address_candidates(address) == [
            "1 Main St, Allen, TX",
            "1 Main St, Allen, TX",
            "Allen, TX",
            "Allen, TX",
        ]

    def test_repeated_formats_are_kept(self):
        address = CONGRESS.model_copy(update={"line2": None})

        candidates = build_address_candidates(address)

        assert candidates == [
            "100 Congress Ave, Austin, TX, 78701, USA",
            "100 Congress Ave, Austin, TX, 78701, USA",
            "Austin, TX, 78701",
            "Austin, TX",
        ]

    def test_empty_record(self):
        assert build_address_candidates(AddressRecord()) == []

    def test_custom_formats(self):
        formats = (("postal_code",), ("state",))
        assert build_address_candidates(CONGRESS, formats) == ["78701", "TX"]

    def test_four_default_formats(self):
        assert len(ADDRESS_FORMATS) == 4


class TestPacingPolicy:
    def test_defaults(self):
        policy = PacingPolicy()
        assert policy.attempt_delay == 0.5
        assert policy.entity_delay == 1.0
        assert policy.max_attempts == 4

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"attempt_delay": 0.1},
            {"entity_delay": 0.5},
            {"attempt_delay": -1, "strict": False},
        ],
    )
    def test_invalid_policies(self, kwargs):
        with pytest.raises(ValueError):
            PacingPolicy(**kwargs)

    def test_non_strict_allows_short_delays(self):
        policy = PacingPolicy(attempt_delay=0, entity_delay=0, strict=False)
        assert policy.attempt_delay == 0

    def test_waits_use_injected_sleep(self, recording_sleep):
        policy = PacingPolicy(
            attempt_delay=0.75, entity_delay=2.0, sleep=recording_sleep
        )

        policy.wait_between_attempts()
        policy.wait_between_entities()

        assert recording_sleep.delays == [0.75, 2.0]


class TestResolveOne:
    def test_first_format_success(
        self, fake_provider, address_resolver, recording_sleep
    ):
        fake_provider.responses[
            "100 Congress Avenue, Suite 200, Austin, TX, 78701, USA"
        ] = [AUSTIN]

        outcome = address_resolver.resolve_one(CONGRESS)

        assert isinstance(outcome, GeocodeSuccess)
        assert outcome.success
        assert outcome.address_used == CONGRESS_CANDIDATES[0]
        assert outcome.attempts == CONGRESS_CANDIDATES[:1]
        assert recording_sleep.delays == []

    def test_city_state_success_after_three_failures(
        self, fake_provider, address_resolver, recording_sleep
    ):
        fake_provider.responses["Austin, TX"] = [AUSTIN]

        outcome = address_resolver.resolve_one(CONGRESS)

        assert isinstance(outcome, GeocodeSuccess)
        assert outcome.address_used == "Austin, TX"
        assert outcome.attempts == CONGRESS_CANDIDATES
        assert outcome.coordinates.latitude == pytest.approx(30.2672)
        assert outcome.display_name == AUSTIN["display_name"]
        assert recording_sleep.delays == [0.5, 0.5, 0.5]

    def test_without_line2_still_makes_three_prior_attempts(
        self, fake_provider, address_resolver, recording_sleep
    ):
        fake_provider.responses["Austin, TX"] = [AUSTIN]
        address = CONGRESS.model_copy(update={"line2": None})

        outcome = address_resolver.resolve_one(address)

        assert isinstance(outcome, GeocodeSuccess)
        assert outcome.address_used == "Austin, TX"
        assert outcome.attempts == [
            "100 Congress Ave, Austin, TX, 78701, USA",
            "100 Congress Ave, Austin, TX, 78701, USA",
            "Austin, TX, 78701",
            "Austin, TX",
        ]
        assert len(fake_provider.calls) == 4
        assert recording_sleep.delays == [0.5, 0.5, 0.5]

    def test_all_formats_fail(self, fake_provider, address_resolver, recording_sleep):
        outcome = address_resolver.resolve_one(CONGRESS)

        assert isinstance(outcome, GeocodeFailure)
        assert not outcome.success
        assert outcome.reason == ALL_FORMATS_FAILED_REASON
        assert outcome.attempts == CONGRESS_CANDIDATES
        # Provider sees each format once, normalized, in order
        assert fake_provider.calls == [
            "100 Congress Avenue, Suite 200, Austin, TX, 78701, USA",
            "100 Congress Avenue, Austin, TX, 78701, USA",
            "Austin, TX, 78701",
            "Austin, TX",
        ]
        assert recording_sleep.delays == [0.5, 0.5, 0.5]

    def test_no_components(self, fake_provider, address_resolver, recording_sleep):
        outcome = address_resolver.resolve_one(AddressRecord(line1="  "))

        assert isinstance(outcome, GeocodeFailure)
        assert outcome.reason == NO_COMPONENTS_REASON
        assert outcome.attempts == []
        assert fake_provider.calls == []
        assert recording_sleep.delays == []

    def test_provider_error_moves_to_next_format(
        self, fake_provider, address_resolver
    ):
        from geopy.exc import GeocoderTimedOut

        fake_provider.responses[
            "100 Congress Avenue, Suite 200, Austin, TX, 78701, USA"
        ] = GeocoderTimedOut("timed out")
        fake_provider.responses["100 Congress Avenue, Austin, TX, 78701, USA"] = [
            AUSTIN
        ]

        outcome = address_resolver.resolve_one(CONGRESS)

        assert outcome.success
        assert outcome.address_used == CONGRESS_CANDIDATES[1]

    def test_max_attempts_limits_formats(self, fake_provider, geocoding_service):
        policy = PacingPolicy(max_attempts=2, sleep=RecordingSleep())
        resolver = AddressResolver(geocoding_service, policy)

        outcome = resolver.resolve_one(CONGRESS)

        assert isinstance(outcome, GeocodeFailure)
        assert outcome.attempts == CONGRESS_CANDIDATES[:2]
        assert len(fake_provider.calls) == 2


class TestResolveMany:
    ADDRESSES = [
        AddressRecord(city="Austin", state="TX"),
        AddressRecord(city="Round Rock", state="TX"),
        AddressRecord(city="Dallas", state="TX"),
    ]

    @pytest.fixture(autouse=True)
    def responses(self, fake_provider):
        fake_provider.responses.update(
            {
                "Austin, TX": [AUSTIN],
                "Round Rock, TX": [ROUND_ROCK],
                "Dallas, TX": [DALLAS],
            }
        )

    def test_outcomes_in_input_order(self, address_resolver):
        outcomes = address_resolver.resolve_many(self.ADDRESSES)

        assert [outcome.address_used for outcome in outcomes] == [
            "Austin, TX",
            "Round Rock, TX",
            "Dallas, TX",
        ]

    def test_entity_delay_between_addresses(self, address_resolver, recording_sleep):
        address_resolver.resolve_many(self.ADDRESSES)

        assert recording_sleep.delays == [1.0, 1.0]

    def test_empty_input(self, address_resolver, recording_sleep):
        assert address_resolver.resolve_many([]) == []
        assert recording_sleep.delays == []

    def test_failure_does_not_stop_run(self, fake_provider, address_resolver):
        del fake_provider.responses["Round Rock, TX"]

        outcomes = address_resolver.resolve_many(self.ADDRESSES)

        assert [outcome.success for outcome in outcomes] == [True, False, True]

    def test_unexpected_error_reported_as_failure(
        self, fake_provider, address_resolver
    ):
        fake_provider.responses["Round Rock, TX"] = RuntimeError("boom")

        outcomes = address_resolver.resolve_many(self.ADDRESSES)

        assert outcomes[0].success
        assert isinstance(outcomes[1], GeocodeFailure)
        assert outcomes[1].reason == "Unexpected error: boom"
        assert outcomes[2].success

    def test_stopping_iteration_cancels_remaining(
        self, fake_provider, address_resolver, recording_sleep
    ):
        outcomes = address_resolver.iter_resolve(self.ADDRESSES)

        first = next(outcomes)
        outcomes.close()

        assert first.success
        assert fake_provider.calls == ["Austin, TX"]
        assert recording_sleep.delays == []

    def test_accepts_generators(self, address_resolver):
        outcomes = address_resolver.resolve_many(
            address for address in self.ADDRESSES
        )
        assert len(outcomes) == 3
