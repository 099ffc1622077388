"""
tests/test_link_classifier.py

Unit tests for candidate ranking, the auto-link / pending thresholds and the
LinkDecision state invariants.

Coverage
--------
- Threshold boundaries (90, 89, 70, 69)
- Empty candidate list
- Ranking, tie order and top-N retention
- Invalid LinkDecision combinations
"""

from __future__ import annotations

import pytest

from app.domain.production_batch import ComponentScores, LinkCandidate, LinkDecision, LinkState
from app.matching.classifier import classify_candidates, rank_candidates


def _candidate(delivery_id: str, confidence: int) -> LinkCandidate:
    # Spread the total over factors without exceeding any factor maximum.
    date = min(confidence, 25)
    client = min(confidence - date, 35)
    volume = min(confidence - date - client, 25)
    formula = confidence - date - client - volume
    return LinkCandidate(
        delivery_id=delivery_id,
        scores=ComponentScores(date=date, client=client, volume=volume, formula=formula),
    )


class TestClassifyCandidates:
    @pytest.mark.parametrize(
        ("confidence", "state"),
        [
            (100, LinkState.AUTO_LINKED),
            (90, LinkState.AUTO_LINKED),
            (89, LinkState.PENDING),
            (70, LinkState.PENDING),
        ],
    )
    def test_linked_states_carry_best_delivery(self, confidence: int, state: LinkState) -> None:
        decision = classify_candidates([_candidate("BL-1", confidence)])

        assert decision.state is state
        assert decision.confidence == confidence
        assert decision.delivery_id == "BL-1"

    @pytest.mark.parametrize("confidence", [69, 35, 0])
    def test_low_confidence_assigns_nothing(self, confidence: int) -> None:
        decision = classify_candidates([_candidate("BL-1", confidence)])

        assert decision.state is LinkState.NO_MATCH
        assert decision.confidence == confidence
        assert decision.delivery_id is None

    def test_no_candidates_is_no_match_with_zero_confidence(self) -> None:
        decision = classify_candidates([])

        assert decision == LinkDecision(LinkState.NO_MATCH, 0, None, ())

    def test_best_candidate_wins_regardless_of_input_order(self) -> None:
        decision = classify_candidates(
            [_candidate("BL-1", 60), _candidate("BL-2", 95), _candidate("BL-3", 75)]
        )

        assert decision.state is LinkState.AUTO_LINKED
        assert decision.delivery_id == "BL-2"
        assert [c.delivery_id for c in decision.candidates] == ["BL-2", "BL-3", "BL-1"]

    def test_ties_keep_retrieval_order(self) -> None:
        decision = classify_candidates([_candidate("BL-A", 80), _candidate("BL-B", 80)])

        assert decision.delivery_id == "BL-A"

    def test_only_top_five_candidates_are_retained(self) -> None:
        candidates = [_candidate(f"BL-{i}", 40 + i) for i in range(8)]

        decision = classify_candidates(candidates)

        assert len(decision.candidates) == 5
        assert [c.confidence for c in decision.candidates] == [47, 46, 45, 44, 43]

    def test_retained_count_is_configurable(self) -> None:
        candidates = [_candidate(f"BL-{i}", 90 - i) for i in range(4)]

        assert len(classify_candidates(candidates, retained=2).candidates) == 2

    def test_rank_candidates_sorts_descending(self) -> None:
        ranked = rank_candidates([_candidate("a", 10), _candidate("b", 30), _candidate("c", 20)])

        assert [c.delivery_id for c in ranked] == ["b", "c", "a"]


class TestLinkDecision:
    def test_manual_link_is_not_a_classifier_outcome(self) -> None:
        with pytest.raises(ValueError):
            LinkDecision(LinkState.MANUAL_LINKED, 0, "BL-1")

    def test_no_match_cannot_carry_delivery(self) -> None:
        with pytest.raises(ValueError):
            LinkDecision(LinkState.NO_MATCH, 40, "BL-1")

    @pytest.mark.parametrize("state", [LinkState.AUTO_LINKED, LinkState.PENDING])
    def test_linked_states_require_delivery(self, state: LinkState) -> None:
        with pytest.raises(ValueError):
            LinkDecision(state, 95, None)

    @pytest.mark.parametrize("confidence", [-1, 101])
    def test_confidence_must_be_in_range(self, confidence: int) -> None:
        with pytest.raises(ValueError):
            LinkDecision.no_match(confidence)

    def test_is_frozen(self) -> None:
        decision = LinkDecision.pending("BL-1", 75)
        with pytest.raises((AttributeError, TypeError)):
            decision.confidence = 99  # type: ignore[misc]
