"""Assessment service - orchestrates venue credit assessment use cases."""

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import structlog

from src.application.dto import (
    AssessmentDetailsResponse,
    AssessmentListResponse,
    AssessmentRecordDTO,
    BatchRefreshResult,
    OfferResponse,
    PortfolioSummaryResponse,
    SnapshotDTO,
    VenueAssessmentResponse,
)
from src.core.config import settings as app_settings
from src.core.metrics import (
    record_assessment,
    record_batch_outcome,
    track_assessment_latency,
    track_batch_refresh,
)
from src.domain.entities import AssessmentFilter, CreditAssessment, utcnow
from src.domain.exceptions import AssessmentNotFoundException
from src.domain.interfaces import AssessmentRepository, OfferRepository, VenueDataClient
from src.service.scoring import ScoringSettings, assess_venue, explain_assessment, scoring_settings
from src.service.scoring.models import AssessmentResult, EligibilityStatus

logger = structlog.get_logger(__name__)

# Statuses owned by the offer lifecycle; re-assessment leaves them in place
LIFECYCLE_STATUSES = frozenset({EligibilityStatus.OFFER_PENDING, EligibilityStatus.ACTIVE_LOAN})


class AssessmentService:
    """
    Application service for venue credit assessments.
    """

    HISTORY_LIMIT = 12
    OFFERS_LIMIT = 5

    def __init__(
        self,
        assessment_repository: AssessmentRepository,
        offer_repository: OfferRepository,
        venue_client: VenueDataClient,
        scoring: ScoringSettings = scoring_settings,
        concurrency: Optional[int] = None,
    ):
        self._assessment_repo = assessment_repository
        self._offer_repo = offer_repository
        self._venue_client = venue_client
        self._scoring = scoring
        self._concurrency = concurrency or app_settings.assessment_concurrency
        # Repositories share one session; writes must not interleave
        self._persist_lock = asyncio.Lock()

    async def assess_venue(
        self,
        venue_id: str,
        now: Optional[datetime] = None,
    ) -> VenueAssessmentResponse:
        """
        Fetch a venue's trailing payments, score them and store the result.

        Args:
            venue_id: The venue's identifier
            now: Assessment time (defaults to current UTC time)

        Returns:
            VenueAssessmentResponse with the full engine output

        Raises:
            VenueNotFoundException: If the payments platform has no such venue
            VenueDataException: If venue data cannot be fetched
        """
        log = logger.bind(venue_id=venue_id)

        with track_assessment_latency():
            now = now or utcnow()
            venue = await self._venue_client.get_venue(venue_id)
            transactions = await self._venue_client.get_transactions(
                venue_id,
                since=now - timedelta(days=self._scoring.lookback_days),
            )
            log.info("transactions_fetched", count=len(transactions))

            result = assess_venue(
                venue.identity,
                transactions,
                now=now,
                settings=self._scoring,
            )
            current_status = await self._store(result)

        record_assessment(
            grade=result.credit_grade.value,
            eligibility=result.eligibility_status.value,
            score=result.credit_score,
            recommended_limit=result.recommendation.recommended_credit_limit,
        )
        log.info(
            "assessment_calculated",
            credit_score=result.credit_score,
            credit_grade=result.credit_grade.value,
            eligibility=result.eligibility_status.value,
            current_status=current_status.value,
            recommended_limit=result.recommendation.recommended_credit_limit,
            gate_failures=len(result.eligibility_gates.failures),
        )

        log.debug("assessment_explained", explanation=explain_assessment(result))

        return VenueAssessmentResponse.from_result(result, current_status.value)

    async def refresh_all_assessments(self) -> BatchRefreshResult:
        """
        Re-assess every active venue with bounded concurrency.

        A failure for one venue is logged and counted and never stops
        the others.
        """
        venue_ids = await self._venue_client.list_active_venue_ids()
        logger.info("batch_refresh_started", venues=len(venue_ids), concurrency=self._concurrency)

        semaphore = asyncio.Semaphore(self._concurrency)

        async def refresh(venue_id: str) -> bool:
            async with semaphore:
                try:
                    await self.assess_venue(venue_id)
                    return True
                except Exception as e:
                    logger.error(
                        "venue_assessment_failed",
                        venue_id=venue_id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    return False

        with track_batch_refresh():
            outcomes = await asyncio.gather(*(refresh(venue_id) for venue_id in venue_ids))

        failed_ids = [venue_id for venue_id, ok in zip(venue_ids, outcomes) if not ok]
        success = len(venue_ids) - len(failed_ids)

        record_batch_outcome(success=success, failed=len(failed_ids))
        logger.info("batch_refresh_completed", success=success, failed=len(failed_ids))

        return BatchRefreshResult(
            success=success,
            failed=len(failed_ids),
            failed_venue_ids=failed_ids,
        )

    async def list_assessments(self, filters: AssessmentFilter) -> AssessmentListResponse:
        """List stored assessments with filtering, sorting and paging."""
        assessments, total = await self._assessment_repo.list(filters)
        return AssessmentListResponse(
            items=[AssessmentRecordDTO.from_entity(a) for a in assessments],
            total=total,
            page=filters.page,
            page_size=filters.page_size,
        )

    async def get_summary(self) -> PortfolioSummaryResponse:
        """Portfolio statistics including the count of pending offers."""
        summary = await self._assessment_repo.summary()
        pending = await self._offer_repo.count_pending()
        return PortfolioSummaryResponse.from_entity(replace(summary, pending_offers=pending))

    async def get_assessment_details(self, venue_id: str) -> AssessmentDetailsResponse:
        """
        Get a venue's stored assessment with its recent history and offers.

        Raises:
            AssessmentNotFoundException: If the venue was never assessed
        """
        assessment = await self._assessment_repo.get_by_venue_id(venue_id)
        if assessment is None:
            raise AssessmentNotFoundException(venue_id)

        history = await self._assessment_repo.get_history(venue_id, limit=self.HISTORY_LIMIT)
        offers = await self._offer_repo.get_by_venue_id(venue_id, limit=self.OFFERS_LIMIT)

        return AssessmentDetailsResponse(
            assessment=AssessmentRecordDTO.from_entity(assessment),
            history=[SnapshotDTO.from_entity(s) for s in history],
            offers=[OfferResponse.from_entity(o) for o in offers],
        )

    async def _store(self, result: AssessmentResult) -> EligibilityStatus:
        """Upsert the assessment and append a history snapshot, all or nothing."""
        assessment = CreditAssessment.from_result(result)

        async with self._persist_lock, self._assessment_repo.savepoint():
            existing = await self._assessment_repo.get_by_venue_id(assessment.venue_id)
            if existing is not None and existing.eligibility_status in LIFECYCLE_STATUSES:
                assessment.eligibility_status = existing.eligibility_status

            await self._assessment_repo.upsert(assessment)
            await self._assessment_repo.append_history(assessment.to_snapshot())

        return assessment.eligibility_status
