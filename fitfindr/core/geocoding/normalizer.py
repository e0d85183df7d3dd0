"""Address text normalization and town-name disambiguation."""

import logging
import re
from collections.abc import Iterable, Sequence
from typing import Any

from fitfindr.core.geocoding.constants import (
    DEFAULT_AMBIGUITY_RULES,
    STREET_ABBREVIATIONS,
    AmbiguityRule,
)
from fitfindr.core.geocoding.metrics import GEOCODING_DISAMBIGUATION

logger = logging.getLogger(__name__)

_ABBREVIATION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"\b{re.escape(abbr)}\b", re.IGNORECASE), expansion)
    for abbr, expansion in STREET_ABBREVIATIONS.items()
]


def normalize_address(raw: str | None) -> str:
    """Expand whole-word street-type abbreviations.

    "123 Main St" becomes "123 Main Street" while "Stanley" is untouched.
    ``None`` is treated as an empty string.
    """
    if not raw:
        return ""

    normalized = raw
    for pattern, expansion in _ABBREVIATION_PATTERNS:
        normalized = pattern.sub(expansion, normalized)
    return normalized


class AddressNormalizer:
    """Normalizes queries and detects ambiguous town names.

    Ambiguity rules are data: each rule names a target town, the town it is
    commonly confused with and the state spellings that must follow the
    target in the query for the rule to fire.
    """

    def __init__(self, rules: Sequence[AmbiguityRule] = DEFAULT_AMBIGUITY_RULES):
        self.rules = tuple(rules)
        self._triggers = [(rule, self._compile_trigger(rule)) for rule in self.rules]

    @staticmethod
    def _compile_trigger(rule: AmbiguityRule) -> re.Pattern[str]:
        states = "|".join(re.escape(token) for token in rule.state_tokens)
        return re.compile(
            rf"\b{re.escape(rule.target)}\s*,\s*(?:{states})\b", re.IGNORECASE
        )

    def normalize(self, raw: str | None) -> str:
        """Return the query with street abbreviations expanded."""
        return normalize_address(raw)

    def triggered_rules(self, query: str | None) -> list[AmbiguityRule]:
        """Rules whose target town, followed by a state token, appears in query.

        The query itself is not changed; the rules only drive candidate
        filtering downstream.
        """
        if not query:
            return []
        return [rule for rule, pattern in self._triggers if pattern.search(query)]

    def filter_candidates(
        self, candidates: Iterable[dict[str, Any]], rules: Sequence[AmbiguityRule]
    ) -> list[dict[str, Any]]:
        """Drop candidates that belong to a colliding town.

        A candidate survives when its display name mentions every target
        town and none of the colliding towns. If nothing survives the
        unfiltered candidates are returned unchanged.
        """
        candidates = list(candidates)
        if not rules:
            return candidates

        filtered = [
            candidate
            for candidate in candidates
            if self._matches_rules(str(candidate.get("display_name", "")), rules)
        ]

        if not filtered:
            logger.info(
                "Disambiguation removed all %d candidates, using unfiltered list",
                len(candidates),
            )
            GEOCODING_DISAMBIGUATION.labels(result="fallback").inc()
            return candidates

        GEOCODING_DISAMBIGUATION.labels(result="filtered").inc()
        return filtered

    @staticmethod
    def _matches_rules(display_name: str, rules: Sequence[AmbiguityRule]) -> bool:
        name = display_name.lower()
        return all(
            rule.target.lower() in name and rule.colliding.lower() not in name
            for rule in rules
        )
