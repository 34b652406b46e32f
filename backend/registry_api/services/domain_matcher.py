"""
Domain pattern matching for wildcard domain mappings.

A wildcard pattern uses ``*`` to stand for any sequence of characters
(including dots), e.g. ``*.atlassian.net`` matches ``acme.atlassian.net``
and ``eu.acme.atlassian.net``. Patterns must match the whole domain.
"""

import math
import re
from functools import lru_cache

WILDCARD_TOKEN = "*"

# Exact mappings always score this; wildcard scores start at the base and grow with specificity
EXACT_CONFIDENCE = 100
WILDCARD_BASE_CONFIDENCE = 70
WILDCARD_SPECIFICITY_WEIGHT = 20


@lru_cache(maxsize=1024)
def _compile_wildcard(pattern: str) -> "re.Pattern[str]":
    # "*.github.com" -> "^.*\.github\.com$"
    escaped = re.escape(pattern).replace(re.escape(WILDCARD_TOKEN), ".*")
    return re.compile(escaped)


def matches_wildcard(domain: str, pattern: str) -> bool:
    """Return True if ``domain`` satisfies ``pattern`` over its full length."""
    return _compile_wildcard(pattern).fullmatch(domain) is not None


def wildcard_confidence(domain: str, pattern: str) -> int:
    """
    Score a wildcard match between 70 and 100.

    The score grows with the share of literal (non-``*``) pattern segments
    relative to the number of domain segments:
    ``70 + 20 * specific_segments / domain_segments`` rounded, capped at 100.
    """
    specific_parts = len([part for part in pattern.split(".") if part != WILDCARD_TOKEN])
    total_parts = len(domain.split("."))

    specificity_ratio = specific_parts / total_parts
    # Halves round up (72.5 -> 73), not to even
    confidence = math.floor(WILDCARD_BASE_CONFIDENCE + specificity_ratio * WILDCARD_SPECIFICITY_WEIGHT + 0.5)
    return min(confidence, EXACT_CONFIDENCE)
