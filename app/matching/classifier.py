"""
app/matching/classifier.py

Confidence thresholds turning scored candidates into a link decision.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.production_batch import LinkCandidate, LinkDecision

AUTO_LINK_THRESHOLD = 90
PENDING_THRESHOLD = 70
DEFAULT_RETAINED_CANDIDATES = 5


def rank_candidates(candidates: Iterable[LinkCandidate]) -> list[LinkCandidate]:
    """Highest confidence first; ties keep retrieval order."""
    return sorted(candidates, key=lambda candidate: candidate.confidence, reverse=True)


def classify_candidates(
    candidates: Iterable[LinkCandidate],
    *,
    retained: int = DEFAULT_RETAINED_CANDIDATES,
) -> LinkDecision:
    """
    Pick the best candidate and map its confidence onto a link state.

    >= 90 auto-links, 70..89 is a tentative link awaiting review, anything
    lower assigns nothing. The top ``retained`` candidates are kept on every
    decision for review tooling.
    """

    ranked = rank_candidates(candidates)
    if not ranked:
        return LinkDecision.no_match()

    shortlist = tuple(ranked[: max(1, retained)])
    best = ranked[0]

    if best.confidence >= AUTO_LINK_THRESHOLD:
        return LinkDecision.auto_linked(best.delivery_id, best.confidence, shortlist)
    if best.confidence >= PENDING_THRESHOLD:
        return LinkDecision.pending(best.delivery_id, best.confidence, shortlist)
    return LinkDecision.no_match(best.confidence, shortlist)
