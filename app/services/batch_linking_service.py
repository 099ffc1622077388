"""
app/services/batch_linking_service.py

Links production batches to same-day delivery notes.

``BatchLinker`` runs retrieval, scoring and classification for one batch and
is shared by the import coordinator and the re-link endpoint.
``BatchLinkingService`` adds the operator-facing actions: re-link a stored
batch, confirm a link by hand, and browse batches by link state.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from functools import lru_cache

from app.config import get_batch_import_settings
from app.domain.production_batch import BatchRecord, LinkDecision, LinkState, StoredBatch
from app.matching.classifier import DEFAULT_RETAINED_CANDIDATES, classify_candidates
from app.matching.similarity import BatchDeliveryScorer
from app.repositories.reconciliation_store import ReconciliationStore
from db.repositories.errors import BatchNotFoundError, BatchPersistenceError, DeliveryNotFoundError

logger = logging.getLogger(__name__)


class BatchLinker:
    """
    Retrieve same-day candidates, score them and classify the best one.
    """

    def __init__(
        self,
        *,
        candidate_limit: int = 100,
        retained_candidates: int = DEFAULT_RETAINED_CANDIDATES,
        scorer: BatchDeliveryScorer | None = None,
    ) -> None:
        self._candidate_limit = max(1, candidate_limit)
        self._retained_candidates = max(1, retained_candidates)
        self._scorer = scorer or BatchDeliveryScorer()

    def link(self, record: BatchRecord, store: ReconciliationStore) -> LinkDecision:
        deliveries = store.fetch_deliveries_for_date(record.batch_date, limit=self._candidate_limit)
        if not deliveries:
            decision = LinkDecision.no_match()
        else:
            candidates = self._scorer.score_all(record, deliveries)
            decision = classify_candidates(candidates, retained=self._retained_candidates)

        logger.debug(
            "Batch link decision batch=%s state=%s confidence=%s delivery=%s candidates=%d",
            record.batch_number,
            decision.state.value,
            decision.confidence,
            decision.delivery_id,
            len(deliveries),
        )
        return decision


@dataclass(frozen=True)
class BatchListing:
    batches: list[StoredBatch]
    counts: dict[str, int] = field(default_factory=dict)


class BatchLinkingService:
    """
    Operator actions on stored production batches.
    """

    def __init__(self, *, linker: BatchLinker | None = None) -> None:
        self._linker = linker or BatchLinker()

    def relink(self, *, batch_id: uuid.UUID, store: ReconciliationStore) -> tuple[StoredBatch, LinkDecision]:
        """
        Re-run automatic linking for one stored batch and persist the outcome.
        """

        stored = store.get_batch(batch_id)
        if stored is None:
            raise BatchNotFoundError(f"Batch not found: {batch_id}")

        try:
            decision = self._linker.link(stored.record, store)
            updated = store.update_batch_link(
                batch_id,
                link_status=decision.state,
                link_confidence=decision.confidence,
                linked_delivery_id=decision.delivery_id,
            )
            store.commit()
        except BatchPersistenceError:
            store.rollback()
            raise

        logger.info(
            "Batch re-linked batch_id=%s state=%s confidence=%s delivery=%s",
            batch_id,
            decision.state.value,
            decision.confidence,
            decision.delivery_id,
        )
        return updated, decision

    def link_manually(
        self,
        *,
        batch_id: uuid.UUID,
        delivery_id: str,
        store: ReconciliationStore,
    ) -> StoredBatch:
        """
        Record an operator-confirmed link. Confidence is cleared because the
        link no longer rests on the scorer.
        """

        if store.get_batch(batch_id) is None:
            raise BatchNotFoundError(f"Batch not found: {batch_id}")
        delivery = store.get_delivery(delivery_id)
        if delivery is None:
            raise DeliveryNotFoundError(f"Delivery not found: {delivery_id}")

        try:
            updated = store.update_batch_link(
                batch_id,
                link_status=LinkState.MANUAL_LINKED,
                link_confidence=None,
                linked_delivery_id=delivery.delivery_id,
            )
            store.commit()
        except BatchPersistenceError:
            store.rollback()
            raise

        logger.info("Batch linked manually batch_id=%s delivery=%s", batch_id, delivery.delivery_id)
        return updated

    def list_batches(
        self,
        *,
        store: ReconciliationStore,
        link_status: LinkState | None = None,
        limit: int = 100,
    ) -> BatchListing:
        counts = {state.value: 0 for state in LinkState}
        counts.update(store.count_batches_by_status())
        return BatchListing(
            batches=store.list_batches(limit=limit, link_status=link_status),
            counts=counts,
        )


@lru_cache(maxsize=1)
def get_batch_linker() -> BatchLinker:
    settings = get_batch_import_settings()
    return BatchLinker(
        candidate_limit=settings.candidate_limit,
        retained_candidates=settings.retained_candidates,
    )


@lru_cache(maxsize=1)
def get_batch_linking_service() -> BatchLinkingService:
    """
    Build and cache the linking service with env-driven settings.
    """

    return BatchLinkingService(linker=get_batch_linker())
