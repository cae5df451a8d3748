"""In-app notifications for match and account events.

Every dispatch is best effort: failures are logged and never raised to the
caller, so the action that triggered the notification still succeeds.
"""

import logging
import uuid
from typing import Callable, Optional

from app.errors import LostFoundError, NotificationDispatchError
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.match_request import MatchRequest
from app.models.notification import Notification
from app.repository.base import Repository

logger = logging.getLogger(__name__)

DASHBOARD_MATCHES_LINK = "/dashboard?tab=matches"
DASHBOARD_LINK = "/dashboard"


def admin_match_link(match_id: uuid.UUID) -> str:
    return f"/admin/matches/{match_id}"


class Notifier:
    def __init__(self, repository: Repository):
        self.repository = repository

    def _persist(self, notification: Notification) -> Notification:
        try:
            return self.repository.create_notification(notification)
        except Exception as e:
            raise NotificationDispatchError(
                f"Could not store notification '{notification.title}' for user {notification.user_id}"
            ) from e

    def create_notification(
        self,
        user_id: uuid.UUID,
        title: str,
        body: str,
        link: Optional[str] = None,
    ) -> Optional[Notification]:
        notification = Notification(user_id=user_id, title=title, body=body, link=link)

        try:
            created = self._persist(notification)
        except NotificationDispatchError:
            logger.exception("Failed to create notification")
            return None

        logger.info("Created notification for user %s: %s", user_id, title)
        return created

    def notify_match_created(self, match: MatchRequest, lost_item: LostItem, found_item: FoundItem) -> None:
        self.create_notification(
            lost_item.user_id,
            "Potential Match Found!",
            f'Your lost item "{lost_item.title}" might match a found item. Score: {match.score}%',
            DASHBOARD_MATCHES_LINK,
        )
        self.create_notification(
            found_item.user_id,
            "Potential Match Found!",
            f'Your found item "{found_item.title}" might match a lost item. Score: {match.score}%',
            DASHBOARD_MATCHES_LINK,
        )

        try:
            admins = self.repository.list_admins()
        except LostFoundError:
            logger.exception("Could not load admins for match %s", match.id)
            return

        for admin in admins:
            self.create_notification(
                admin.id,
                "New Match Request",
                f'Match between "{lost_item.title}" and "{found_item.title}" requires review (Score: {match.score}%)',
                admin_match_link(match.id),
            )

    def notify_match_approval(self, match_id: uuid.UUID) -> None:
        try:
            match = self.repository.get_match_request_with_items(match_id)
        except LostFoundError:
            logger.exception("Failed to send match approval notifications for match %s", match_id)
            return

        if not match:
            logger.error("Match %s not found, no approval notifications sent", match_id)
            return

        self.create_notification(
            match.lost_item.user_id,
            "Match Approved!",
            f'Your match for "{match.lost_item.title}" has been approved. You can now coordinate with the finder.',
            DASHBOARD_MATCHES_LINK,
        )
        self.create_notification(
            match.found_item.user_id,
            "Match Approved!",
            f'Your match for "{match.found_item.title}" has been approved. You can now coordinate with the owner.',
            DASHBOARD_MATCHES_LINK,
        )

        logger.info("Match approval notifications sent for match %s", match_id)

    def notify_user_verification(self, user_id: uuid.UUID) -> None:
        self.create_notification(
            user_id,
            "Account Verified!",
            "Your account has been verified by an administrator. You can now access all features.",
            DASHBOARD_LINK,
        )


# Signature of FastAPI's BackgroundTasks.add_task: dispatch(func, *args)
Dispatch = Callable[..., None]


def dispatch_inline(func: Callable[..., None], *args, **kwargs) -> None:
    try:
        func(*args, **kwargs)
    except Exception:
        logger.exception("Notification dispatch %s failed", getattr(func, "__name__", func))
