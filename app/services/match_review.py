import logging
import uuid

from app.errors import NotFoundError, ValidationError
from app.models.enums import ItemStatus, MatchStatus
from app.models.match_request import MatchRequest
from app.repository.base import Repository
from app.services.transitions import ensure_item_transition, ensure_match_transition
from app.utils.notifier import Dispatch, Notifier, dispatch_inline

logger = logging.getLogger(__name__)

REVIEW_DECISIONS = (MatchStatus.APPROVED.value, MatchStatus.REJECTED.value)


class MatchReviewService:
    """Admin decisions on match requests and the item updates they cause."""

    def __init__(self, repository: Repository, notifier: Notifier, dispatch: Dispatch = dispatch_inline):
        self.repository = repository
        self.notifier = notifier
        self.dispatch = dispatch

    def verify(self, match_id: uuid.UUID, status: str) -> MatchRequest:
        if status == MatchStatus.APPROVED.value:
            return self.approve(match_id)
        if status == MatchStatus.REJECTED.value:
            return self.reject(match_id)

        raise ValidationError("Status must be 'approved' or 'rejected'")

    def approve(self, match_id: uuid.UUID) -> MatchRequest:
        enriched = self.repository.get_match_request_with_items(match_id)
        if not enriched:
            raise NotFoundError("Match request", match_id)

        ensure_match_transition(enriched.status, MatchStatus.APPROVED.value)

        # approving twice rewrites matched on already-matched items
        for item in (enriched.lost_item, enriched.found_item):
            if item.status != ItemStatus.MATCHED.value:
                ensure_item_transition(item.status, ItemStatus.MATCHED.value)

        match = self.repository.update_match_request_status(match_id, MatchStatus.APPROVED.value)
        self.repository.update_lost_item_status(enriched.lost_item.id, ItemStatus.MATCHED.value)
        self.repository.update_found_item_status(enriched.found_item.id, ItemStatus.MATCHED.value)

        logger.info("Match %s approved", match_id)

        self.dispatch(self.notifier.notify_match_approval, match_id)
        return match

    def reject(self, match_id: uuid.UUID) -> MatchRequest:
        match = self.repository.get_match_request(match_id)
        if not match:
            raise NotFoundError("Match request", match_id)

        ensure_match_transition(match.status, MatchStatus.REJECTED.value)

        match = self.repository.update_match_request_status(match_id, MatchStatus.REJECTED.value)
        logger.info("Match %s rejected", match_id)
        return match
