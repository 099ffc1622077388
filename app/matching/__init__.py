"""
app/matching package marker.
"""

from app.matching.classifier import (
    AUTO_LINK_THRESHOLD,
    PENDING_THRESHOLD,
    classify_candidates,
    rank_candidates,
)
from app.matching.similarity import (
    BatchDeliveryScorer,
    ContainmentNameMatcher,
    NameMatcher,
    TokenOverlapNameMatcher,
    normalize_name,
)

__all__ = [
    "AUTO_LINK_THRESHOLD",
    "PENDING_THRESHOLD",
    "BatchDeliveryScorer",
    "ContainmentNameMatcher",
    "NameMatcher",
    "TokenOverlapNameMatcher",
    "classify_candidates",
    "normalize_name",
    "rank_candidates",
]
