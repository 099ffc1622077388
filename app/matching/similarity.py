"""
app/matching/similarity.py

Weighted multi-factor scorer pairing a production batch with a delivery note.

Four independent factors are scored and summed into a 0-100 confidence:

    date     max 25   batch time vs. delivery departure/planned time
    client   max 35   client display name similarity
    volume   max 25   relative volume difference
    formula  max 15   formula code containment

Each factor is a pure function so it can be tested and reused on its own.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Protocol

from thefuzz import fuzz

from app.domain.production_batch import (
    BatchRecord,
    ComponentScores,
    DeliveryRecord,
    LinkCandidate,
)

DATE_WEIGHT = 25
CLIENT_WEIGHT = 35
VOLUME_WEIGHT = 25
FORMULA_WEIGHT = 15

# Delivery times further than this from the batch time earn no date credit.
TIME_WINDOW = timedelta(hours=2)
NO_TIME_DATE_SCORE = 10

# (max minutes apart, score), checked in order.
_TIME_TIERS: tuple[tuple[float, int], ...] = (
    (30, 25),
    (60, 20),
)
_IN_WINDOW_TIME_SCORE = 15

# (max relative difference, score), checked in order.
_VOLUME_TIERS: tuple[tuple[float, int], ...] = (
    (0.02, 25),
    (0.05, 20),
    (0.10, 15),
)

FUZZY_CLIENT_SCORE = 25
DEFAULT_TOKEN_SET_RATIO = 90

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


def normalize_name(value: str) -> str:
    """Lowercase, drop accents and every non-alphanumeric character."""
    return _NON_ALNUM.sub("", _fold(value))


class NameMatcher(Protocol):
    """
    Decides whether two client names that are not identical after
    normalization still name the same customer.
    """

    def is_similar(self, left: str, right: str) -> bool:
        ...


class ContainmentNameMatcher:
    """
    Normalized substring containment in either direction.

    Short names (a single initial, say) can be contained in unrelated names.
    """

    def is_similar(self, left: str, right: str) -> bool:
        a = normalize_name(left)
        b = normalize_name(right)
        if not a or not b:
            return False
        return a in b or b in a


class TokenOverlapNameMatcher(ContainmentNameMatcher):
    """
    Containment, or a token-set ratio of at least ``min_ratio`` (0-100) on the
    accent-folded names. Accepts reordered words ("Beton Plus SARL" vs.
    "SARL Beton Plus") and small spelling drift ("Betons Plus SARL").
    """

    def __init__(self, min_ratio: int = DEFAULT_TOKEN_SET_RATIO) -> None:
        self._min_ratio = min_ratio

    def is_similar(self, left: str, right: str) -> bool:
        if super().is_similar(left, right):
            return True
        return fuzz.token_set_ratio(_fold(left), _fold(right)) >= self._min_ratio


def score_date(batch_datetime: datetime, delivery: DeliveryRecord) -> int:
    reference_time = delivery.reference_time
    if reference_time is None:
        return NO_TIME_DATE_SCORE

    delivery_datetime = datetime.combine(
        batch_datetime.date(),
        reference_time,
        tzinfo=batch_datetime.tzinfo,
    )
    difference = abs(batch_datetime - delivery_datetime)
    if difference > TIME_WINDOW:
        return 0

    minutes = difference.total_seconds() / 60
    for max_minutes, score in _TIME_TIERS:
        if minutes <= max_minutes:
            return score
    return _IN_WINDOW_TIME_SCORE


def score_client(batch_client: str, delivery_client: str, matcher: NameMatcher) -> int:
    a = normalize_name(batch_client)
    b = normalize_name(delivery_client)
    if not a or not b:
        return 0
    if a == b:
        return CLIENT_WEIGHT
    if matcher.is_similar(batch_client, delivery_client):
        return FUZZY_CLIENT_SCORE
    return 0


def score_volume(batch_volume: float, delivery_volume: float) -> int:
    if batch_volume <= 0:
        return 0
    relative_difference = abs(delivery_volume - batch_volume) / batch_volume
    for max_difference, score in _VOLUME_TIERS:
        if relative_difference <= max_difference:
            return score
    return 0


def score_formula(batch_formula: str, delivery_formula: str) -> int:
    a = batch_formula.strip().lower()
    b = (delivery_formula or "").strip().lower()
    if not a or not b:
        return 0
    if a == b or a in b or b in a:
        return FORMULA_WEIGHT
    return 0


class BatchDeliveryScorer:
    """
    Scores batch/delivery pairs. Stateless apart from the name matcher.
    """

    def __init__(self, name_matcher: NameMatcher | None = None) -> None:
        self._name_matcher = name_matcher or ContainmentNameMatcher()

    def score(self, batch: BatchRecord, delivery: DeliveryRecord) -> LinkCandidate:
        scores = ComponentScores(
            date=score_date(batch.batch_datetime, delivery),
            client=score_client(batch.client_name, delivery.client_name, self._name_matcher),
            volume=score_volume(batch.total_volume_m3, delivery.volume_m3),
            formula=score_formula(batch.formula_code, delivery.formula_code),
        )
        return LinkCandidate(delivery_id=delivery.delivery_id, scores=scores)

    def score_all(
        self,
        batch: BatchRecord,
        deliveries: Iterable[DeliveryRecord],
    ) -> list[LinkCandidate]:
        return [self.score(batch, delivery) for delivery in deliveries]
