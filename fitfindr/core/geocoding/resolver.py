"""Multi-format address resolution.

An address record is tried as a sequence of progressively less specific
query strings until one geocodes. Bulk resolution processes addresses
strictly one after another with a fixed pause between them to stay within
the provider's usage policy.

Resolving the same address record from two callers at once is not guarded
here; callers must make sure at most one resolution per location runs at a
time.
"""

import logging
import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Optional

from fitfindr.core.config import MIN_ATTEMPT_DELAY_SECONDS, MIN_ENTITY_DELAY_SECONDS
from fitfindr.core.geocoding.metrics import GEOCODING_RESOLUTIONS
from fitfindr.core.geocoding.service import GeocodingService
from fitfindr.models.geocoding import (
    AddressRecord,
    GeocodeFailure,
    GeocodeOutcome,
    GeocodeSuccess,
)

logger = logging.getLogger(__name__)

# Address fields per query format, most specific first
ADDRESS_FORMATS: tuple[tuple[str, ...], ...] = (
    ("line1", "line2", "city", "state", "postal_code", "country"),
    ("line1", "city", "state", "postal_code", "country"),
    ("city", "state", "postal_code"),
    ("city", "state"),
)

NO_COMPONENTS_REASON = "No address components to geocode"
ALL_FORMATS_FAILED_REASON = "No geocoding results with any address format"


@dataclass(frozen=True)
class PacingPolicy:
    """Fixed-delay, fixed-count pacing for provider calls.

    Attributes:
        attempt_delay: Seconds to wait between failed formats of one address
        entity_delay: Seconds to wait between addresses in a bulk run
        max_attempts: Maximum number of formats tried per address
        sleep: Blocking sleep function
        strict: Reject delays below the provider minimums
    """

    attempt_delay: float = MIN_ATTEMPT_DELAY_SECONDS
    entity_delay: float = MIN_ENTITY_DELAY_SECONDS
    max_attempts: int = len(ADDRESS_FORMATS)
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)
    strict: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.attempt_delay < 0 or self.entity_delay < 0:
            raise ValueError("Delays cannot be negative")
        if self.strict and self.attempt_delay < MIN_ATTEMPT_DELAY_SECONDS:
            raise ValueError(
                f"attempt_delay must be at least {MIN_ATTEMPT_DELAY_SECONDS}s"
            )
        if self.strict and self.entity_delay < MIN_ENTITY_DELAY_SECONDS:
            raise ValueError(
                f"entity_delay must be at least {MIN_ENTITY_DELAY_SECONDS}s"
            )

    def wait_between_attempts(self) -> None:
        self.sleep(self.attempt_delay)

    def wait_between_entities(self) -> None:
        self.sleep(self.entity_delay)


def build_address_candidates(
    address: AddressRecord,
    formats: Sequence[Sequence[str]] = ADDRESS_FORMATS,
) -> list[str]:
    """Build query strings for an address, most specific first.

    Blank components are dropped and formats that end up empty are skipped.
    A format that repeats an earlier string is still tried.

    Args:
        address: Address record to format
        formats: Field names per format

    Returns:
        Non-empty query strings in format order
    """
    candidates: list[str] = []
    for fields in formats:
        parts = [(getattr(address, name) or "").strip() for name in fields]
        query = ", ".join(part for part in parts if part)
        if query:
            candidates.append(query)
    return candidates


class AddressResolver:
    """Resolves address records through successive query formats."""

    def __init__(
        self,
        service: GeocodingService,
        policy: Optional[PacingPolicy] = None,
        formats: Sequence[Sequence[str]] = ADDRESS_FORMATS,
    ):
        self.service = service
        self.policy = policy or PacingPolicy()
        self.formats = tuple(tuple(fields) for fields in formats)

    def resolve_one(self, address: AddressRecord) -> GeocodeOutcome:
        """Resolve one address, stopping at the first format that geocodes.

        Args:
            address: Address record of a location

        Returns:
            GeocodeSuccess with the address string used, or GeocodeFailure
        """
        candidates = build_address_candidates(address, self.formats)
        candidates = candidates[: self.policy.max_attempts]

        if not candidates:
            logger.warning("Address has no usable components, skipping geocoding")
            GEOCODING_RESOLUTIONS.labels(status="failure").inc()
            return GeocodeFailure(reason=NO_COMPONENTS_REASON)

        attempts: list[str] = []
        for index, query in enumerate(candidates):
            if index:
                self.policy.wait_between_attempts()

            logger.info(f"Trying to geocode: {query}")
            attempts.append(query)
            result = self.service.geocode_address(query)

            if result:
                GEOCODING_RESOLUTIONS.labels(status="success").inc()
                return GeocodeSuccess(
                    coordinates=result.coordinates,
                    display_name=result.display_name,
                    address_used=query,
                    attempts=attempts,
                )

        logger.warning(f"All {len(attempts)} address formats failed to geocode")
        GEOCODING_RESOLUTIONS.labels(status="failure").inc()
        return GeocodeFailure(reason=ALL_FORMATS_FAILED_REASON, attempts=attempts)

    def iter_resolve(
        self, addresses: Iterable[AddressRecord]
    ) -> Iterator[GeocodeOutcome]:
        """Resolve addresses one at a time, pausing between them.

        Stopping iteration cancels the run before the next address. An
        unexpected error for one address is reported as a failure for that
        address and does not stop the run.

        Args:
            addresses: Address records in processing order

        Yields:
            One outcome per address, in input order
        """
        for index, address in enumerate(addresses):
            if index:
                self.policy.wait_between_entities()

            try:
                outcome = self.resolve_one(address)
            except Exception as e:
                logger.exception(f"Unexpected error while geocoding address: {e}")
                GEOCODING_RESOLUTIONS.labels(status="failure").inc()
                outcome = GeocodeFailure(reason=f"Unexpected error: {e}")

            yield outcome

    def resolve_many(self, addresses: Iterable[AddressRecord]) -> list[GeocodeOutcome]:
        """Resolve every address sequentially; see ``iter_resolve``."""
        return list(self.iter_resolve(addresses))
