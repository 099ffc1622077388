"""
tests/test_similarity_scorer.py

Unit tests for the batch/delivery similarity factors and the combined scorer.
Pure Python, no database.
"""

from __future__ import annotations

from datetime import datetime, time

import pytest

from app.matching.similarity import (
    BatchDeliveryScorer,
    ContainmentNameMatcher,
    TokenOverlapNameMatcher,
    normalize_name,
    score_client,
    score_date,
    score_formula,
    score_volume,
)
from conftest import make_batch, make_delivery

BATCH_TIME = datetime(2024, 3, 1, 10, 0)


# ---------------------------------------------------------------------------
# Combined scorer
# ---------------------------------------------------------------------------


class TestBatchDeliveryScorer:
    def test_close_match_scores_ninety(self) -> None:
        candidate = BatchDeliveryScorer().score(make_batch(), make_delivery())

        assert candidate.scores.date == 25
        assert candidate.scores.client == 25
        assert candidate.scores.volume == 25
        assert candidate.scores.formula == 15
        assert candidate.confidence == 90

    def test_untimed_delivery_with_volume_gap_scores_sixty_five(self) -> None:
        delivery = make_delivery(volume_m3=8.5, departure_time=None)

        candidate = BatchDeliveryScorer().score(make_batch(), delivery)

        assert candidate.scores.date == 10
        assert candidate.scores.client == 25
        assert candidate.scores.volume == 15
        assert candidate.scores.formula == 15
        assert candidate.confidence == 65

    def test_perfect_match_scores_one_hundred(self) -> None:
        delivery = make_delivery(client_name="ACME Corp", departure_time=time(10, 0))

        assert BatchDeliveryScorer().score(make_batch(), delivery).confidence == 100

    def test_confidence_is_sum_of_factors(self) -> None:
        deliveries = [
            make_delivery(delivery_id="BL-1", client_name="Other", volume_m3=20.0),
            make_delivery(delivery_id="BL-2", formula_code="C30", departure_time=time(11, 30)),
            make_delivery(delivery_id="BL-3", scheduled_time=time(9, 0), departure_time=None),
        ]

        for candidate in BatchDeliveryScorer().score_all(make_batch(), deliveries):
            scores = candidate.scores
            assert candidate.confidence == scores.date + scores.client + scores.volume + scores.formula
            assert 0 <= candidate.confidence <= 100

    def test_score_all_keeps_delivery_order(self) -> None:
        deliveries = [make_delivery(delivery_id=f"BL-{i}") for i in range(3)]

        candidates = BatchDeliveryScorer().score_all(make_batch(), deliveries)

        assert [c.delivery_id for c in candidates] == ["BL-0", "BL-1", "BL-2"]

    def test_custom_name_matcher_is_used(self) -> None:
        scorer = BatchDeliveryScorer(name_matcher=TokenOverlapNameMatcher())
        batch = make_batch(client_name="Beton Plus SARL")
        delivery = make_delivery(client_name="SARL Beton Plus")

        assert scorer.score(batch, delivery).scores.client == 25
        assert BatchDeliveryScorer().score(batch, delivery).scores.client == 0


# ---------------------------------------------------------------------------
# Date factor
# ---------------------------------------------------------------------------


class TestScoreDate:
    @pytest.mark.parametrize(
        ("departure", "expected"),
        [
            (time(10, 0), 25),
            (time(10, 30), 25),
            (time(9, 31), 25),
            (time(10, 31), 20),
            (time(9, 0), 20),
            (time(11, 1), 15),
            (time(12, 0), 15),
            (time(8, 0), 15),
            (time(12, 1), 0),
            (time(7, 59), 0),
        ],
    )
    def test_time_tiers(self, departure: time, expected: int) -> None:
        assert score_date(BATCH_TIME, make_delivery(departure_time=departure)) == expected

    def test_no_time_value_earns_partial_credit(self) -> None:
        delivery = make_delivery(departure_time=None, scheduled_time=None)

        assert score_date(BATCH_TIME, delivery) == 10

    def test_scheduled_time_used_when_departure_missing(self) -> None:
        delivery = make_delivery(departure_time=None, scheduled_time=time(10, 45))

        assert score_date(BATCH_TIME, delivery) == 20

    def test_departure_time_preferred_over_schedule(self) -> None:
        delivery = make_delivery(departure_time=time(10, 10), scheduled_time=time(14, 0))

        assert score_date(BATCH_TIME, delivery) == 25


# ---------------------------------------------------------------------------
# Client factor
# ---------------------------------------------------------------------------


class TestScoreClient:
    matcher = ContainmentNameMatcher()

    def test_exact_after_normalization(self) -> None:
        assert score_client("ACME-Corp.", "acme corp", self.matcher) == 35

    def test_accents_are_folded(self) -> None:
        assert score_client("Béton Sàrl", "Beton SARL", self.matcher) == 35

    def test_substring_earns_partial_credit(self) -> None:
        assert score_client("ACME Corp", "ACME", self.matcher) == 25
        assert score_client("ACME", "ACME Corp", self.matcher) == 25

    def test_unrelated_names_score_zero(self) -> None:
        assert score_client("ACME Corp", "Dupont", self.matcher) == 0

    def test_empty_name_scores_zero(self) -> None:
        assert score_client("ACME", "", self.matcher) == 0
        assert score_client("---", "ACME", self.matcher) == 0

    def test_normalize_name(self) -> None:
        assert normalize_name(" Société Générale & Co. ") == "societegeneraleco"


class TestTokenOverlapNameMatcher:
    def test_reordered_words_are_similar(self) -> None:
        assert TokenOverlapNameMatcher().is_similar("Beton Plus SARL", "SARL Beton Plus")

    def test_containment_still_applies(self) -> None:
        assert TokenOverlapNameMatcher().is_similar("ACME", "ACME Corp")

    def test_unrelated_names_are_not_similar(self) -> None:
        assert not TokenOverlapNameMatcher().is_similar("ACME", "Dupont")

    def test_small_spelling_drift_is_similar(self) -> None:
        assert TokenOverlapNameMatcher().is_similar("Beton Plus SARL", "Betons Plus SARL")
        assert not ContainmentNameMatcher().is_similar("Beton Plus SARL", "Betons Plus SARL")

    def test_accents_are_folded_before_comparison(self) -> None:
        assert TokenOverlapNameMatcher().is_similar("Société Béton Nord", "Nord Societe Beton")

    def test_partial_overlap_below_threshold(self) -> None:
        assert not TokenOverlapNameMatcher().is_similar("Beton Plus Nord", "Beton Sud Plus Est")

    def test_threshold_is_configurable(self) -> None:
        assert not TokenOverlapNameMatcher().is_similar("Beton Plus Nord", "Plus Beton Sud")
        assert TokenOverlapNameMatcher(min_ratio=75).is_similar("Beton Plus Nord", "Plus Beton Sud")


# ---------------------------------------------------------------------------
# Volume and formula factors
# ---------------------------------------------------------------------------


class TestScoreVolume:
    @pytest.mark.parametrize(
        ("delivery_volume", "expected"),
        [
            (8.0, 25),
            (8.1, 25),
            (8.3, 20),
            (7.7, 20),
            (8.6, 15),
            (7.3, 15),
            (9.0, 0),
        ],
    )
    def test_relative_difference_tiers(self, delivery_volume: float, expected: int) -> None:
        assert score_volume(8.0, delivery_volume) == expected

    def test_zero_batch_volume_scores_zero(self) -> None:
        assert score_volume(0.0, 0.0) == 0
        assert score_volume(0.0, 8.0) == 0


class TestScoreFormula:
    def test_case_insensitive_equality(self) -> None:
        assert score_formula("c25", "C25") == 15

    def test_containment_either_way(self) -> None:
        assert score_formula("C25", "C25/30 XC1") == 15
        assert score_formula("C25/30", "c25") == 15

    def test_different_formula_scores_zero(self) -> None:
        assert score_formula("C25", "C30") == 0

    def test_empty_formula_scores_zero(self) -> None:
        assert score_formula("C25", "") == 0
        assert score_formula(" ", "C25") == 0
