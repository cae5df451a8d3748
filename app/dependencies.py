from fastapi import BackgroundTasks, Depends

from app.db.db import get_repository
from app.matching.engine import MatchingEngine
from app.repository.base import Repository
from app.services.accounts import AccountService
from app.services.items import ItemService
from app.services.match_review import MatchReviewService
from app.utils.notifier import Notifier

# Notifications run as background tasks, after the primary write has
# produced the response.


def get_matching_engine(
    background_tasks: BackgroundTasks,
    repository: Repository = Depends(get_repository),
) -> MatchingEngine:
    return MatchingEngine(repository, Notifier(repository), dispatch=background_tasks.add_task)


def get_item_service(
    repository: Repository = Depends(get_repository),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> ItemService:
    return ItemService(repository, engine)


def get_match_review_service(
    background_tasks: BackgroundTasks,
    repository: Repository = Depends(get_repository),
) -> MatchReviewService:
    return MatchReviewService(repository, Notifier(repository), dispatch=background_tasks.add_task)


def get_account_service(
    background_tasks: BackgroundTasks,
    repository: Repository = Depends(get_repository),
) -> AccountService:
    return AccountService(repository, Notifier(repository), dispatch=background_tasks.add_task)
