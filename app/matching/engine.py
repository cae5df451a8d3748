import logging

from app.matching.scorer import MatchScore, calculate_match_score
from app.models.enums import ItemStatus, MatchStatus
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.match_request import MatchRequest
from app.repository.base import Repository
from app.utils.notifier import Dispatch, Notifier, dispatch_inline

logger = logging.getLogger(__name__)


class MatchingEngine:
    """Scores new reports against the opposite side and proposes matches.

    Runs synchronously. A repository failure stops the current scan and
    propagates; match requests already written stay in place. Notifications
    go through `dispatch`, inline by default or a FastAPI background task.
    """

    def __init__(self, repository: Repository, notifier: Notifier, dispatch: Dispatch = dispatch_inline):
        self.repository = repository
        self.notifier = notifier
        self.dispatch = dispatch

    def score_pair(self, lost_item: LostItem, found_item: FoundItem) -> MatchScore:
        return calculate_match_score(lost_item, found_item)

    def match_lost_item(self, lost_item: LostItem) -> list[MatchRequest]:
        logger.info("Running matches for lost item: %s", lost_item.title)

        qualifying = []
        for found_item in self.repository.list_found_items():
            if found_item.user_id == lost_item.user_id:
                continue
            if found_item.status != ItemStatus.PENDING.value:
                continue

            result = self.score_pair(lost_item, found_item)
            if result.qualifies:
                logger.info("Match found! Score: %s for %s <-> %s", result.score, lost_item.title, found_item.title)
                qualifying.append(result)

        created = [self._create_match_request(result) for result in qualifying]
        logger.info("Created %s match requests for lost item: %s", len(created), lost_item.title)
        return created

    def match_found_item(self, found_item: FoundItem) -> list[MatchRequest]:
        logger.info("Running matches for found item: %s", found_item.title)

        qualifying = []
        for lost_item in self.repository.list_lost_items():
            if lost_item.user_id == found_item.user_id:
                continue
            if lost_item.status != ItemStatus.PENDING.value:
                continue

            result = self.score_pair(lost_item, found_item)
            if result.qualifies:
                logger.info("Match found! Score: %s for %s <-> %s", result.score, lost_item.title, found_item.title)
                qualifying.append(result)

        created = [self._create_match_request(result) for result in qualifying]
        logger.info("Created %s match requests for found item: %s", len(created), found_item.title)
        return created

    def generate_all_matches(self) -> int:
        """Re-run matching for every pending lost item.

        Pairs that already have a match request are proposed again.
        Returns the number of lost items processed.
        """
        logger.info("Running full match generation...")

        processed = 0
        for lost_item in self.repository.list_lost_items():
            if lost_item.status == ItemStatus.PENDING.value:
                self.match_lost_item(lost_item)
                processed += 1

        logger.info("Full match generation completed. Processed %s lost items.", processed)
        return processed

    def _create_match_request(self, result: MatchScore) -> MatchRequest:
        match = self.repository.create_match_request(
            MatchRequest(
                lost_id=result.lost_item.id,
                found_id=result.found_item.id,
                score=result.score,
                status=MatchStatus.PENDING.value,
            )
        )

        self.dispatch(self.notifier.notify_match_created, match, result.lost_item, result.found_item)
        return match
