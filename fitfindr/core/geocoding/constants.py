"""Constants for address normalization, distance and search.

Street-type abbreviations are expanded before a query is sent to the
provider; ambiguity rules describe town names that the provider tends to
confuse with a more prominent town containing the same token.
"""

from dataclasses import dataclass

from fitfindr.core.config import SEARCH_RADIUS_OPTIONS

# Mean Earth radius used for haversine distances
EARTH_RADIUS_MILES = 3959.0

DEFAULT_RADIUS_MILES = 25

# Whole-word street-type abbreviations and their expansions
STREET_ABBREVIATIONS: dict[str, str] = {
    "St": "Street",
    "Ave": "Avenue",
    "Blvd": "Boulevard",
    "Dr": "Drive",
    "Rd": "Road",
    "Ln": "Lane",
    "Ct": "Court",
    "Pl": "Place",
    "Pkwy": "Parkway",
    "Hwy": "Highway",
    "Fwy": "Freeway",
}


@dataclass(frozen=True)
class AmbiguityRule:
    """A town name that collides with another, more prominent town.

    Attributes:
        target: Town the user meant (e.g. "allen")
        colliding: Town the provider may return instead (e.g. "mcallen")
        state_tokens: State spellings that must follow the target token
    """

    target: str
    colliding: str
    state_tokens: tuple[str, ...]


DEFAULT_AMBIGUITY_RULES: tuple[AmbiguityRule, ...] = (
    AmbiguityRule(target="allen", colliding="mcallen", state_tokens=("TX", "Texas")),
)

__all__ = [
    "AmbiguityRule",
    "DEFAULT_AMBIGUITY_RULES",
    "DEFAULT_RADIUS_MILES",
    "EARTH_RADIUS_MILES",
    "SEARCH_RADIUS_OPTIONS",
    "STREET_ABBREVIATIONS",
]
