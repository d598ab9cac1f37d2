"""
Specificity Arbiter

Chooses between competing values for one classification scheme. The rules
are heuristics kept exactly as the catalogs' users came to expect them:

1. the candidate is more than two characters longer
2. the candidate has a decimal point and the baseline does not
3. the candidate is a Dewey number with decimals (e.g. 823.914) and the
   baseline only the three-digit class (823)
"""

import re
from typing import Iterable


DEWEY_WITH_DECIMALS = re.compile(r"\d{3}\.\d+")
DEWEY_CLASS = re.compile(r"\d{3}")


class SpecificityArbiter:
    """Greedy, order-sensitive choice of the most specific classification."""

    @staticmethod
    def is_more_specific(candidate: str, baseline: str) -> bool:
        if len(candidate) > len(baseline) + 2:
            return True

        if "." in candidate and "." not in baseline:
            return True

        if DEWEY_WITH_DECIMALS.fullmatch(candidate) and DEWEY_CLASS.fullmatch(baseline):
            return True

        return False

    @classmethod
    def pick_best(cls, current: str, candidates: Iterable[str]) -> str:
        """
        Args:
            current: Value already known (e.g. from basic metadata), may be blank
            candidates: Ordered candidates from the aggregation

        Returns:
            The first candidate more specific than current, current when
            none is, or the first candidate when current is blank.
        """
        candidates = list(candidates)

        if not current or not current.strip():
            return candidates[0] if candidates else ""

        for candidate in candidates:
            if cls.is_more_specific(candidate, current):
                return candidate

        return current
