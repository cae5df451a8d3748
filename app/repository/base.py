"""Storage contract consumed by the matching engine, notifier and routers.

Lookups of a single record return None when the record does not exist;
updates and deletes of a missing record raise NotFoundError. Storage
failures surface as RepositoryError.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Union

from app.errors import ReferentialIntegrityError
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.match_request import MatchRequest, MatchRequestWithItems
from app.models.notification import Notification
from app.models.user import User, reporter_summary

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All Categories"
ALL_LOCATIONS = "All Locations"


class Repository(ABC):

    # Users
    @abstractmethod
    def get_user(self, user_id: uuid.UUID) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, user: User) -> User: ...

    @abstractmethod
    def verify_user(self, user_id: uuid.UUID) -> User: ...

    @abstractmethod
    def list_users(self) -> list[User]: ...

    @abstractmethod
    def list_pending_users(self) -> list[User]: ...

    # Lost items
    @abstractmethod
    def create_lost_item(self, item: LostItem) -> LostItem: ...

    @abstractmethod
    def list_lost_items(
        self,
        category: Optional[str] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[LostItem]: ...

    @abstractmethod
    def get_lost_item(self, item_id: uuid.UUID) -> Optional[LostItem]: ...

    @abstractmethod
    def list_user_lost_items(self, user_id: uuid.UUID) -> list[LostItem]: ...

    @abstractmethod
    def delete_lost_item(self, item_id: uuid.UUID) -> None: ...

    @abstractmethod
    def update_lost_item_status(self, item_id: uuid.UUID, status: str) -> LostItem: ...

    # Found items
    @abstractmethod
    def create_found_item(self, item: FoundItem) -> FoundItem: ...

    @abstractmethod
    def list_found_items(
        self,
        category: Optional[str] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[FoundItem]: ...

    @abstractmethod
    def get_found_item(self, item_id: uuid.UUID) -> Optional[FoundItem]: ...

    @abstractmethod
    def list_user_found_items(self, user_id: uuid.UUID) -> list[FoundItem]: ...

    @abstractmethod
    def delete_found_item(self, item_id: uuid.UUID) -> None: ...

    @abstractmethod
    def update_found_item_status(self, item_id: uuid.UUID, status: str) -> FoundItem: ...

    # Match requests
    @abstractmethod
    def create_match_request(self, match: MatchRequest) -> MatchRequest: ...

    @abstractmethod
    def get_match_request(self, match_id: uuid.UUID) -> Optional[MatchRequest]: ...

    @abstractmethod
    def list_raw_match_requests(self, status: Optional[str] = None) -> list[MatchRequest]: ...

    @abstractmethod
    def update_match_request_status(self, match_id: uuid.UUID, status: str) -> MatchRequest: ...

    # Notifications
    @abstractmethod
    def create_notification(self, notification: Notification) -> Notification: ...

    @abstractmethod
    def list_user_notifications(
        self,
        user_id: uuid.UUID,
        limit: Optional[int] = None,
        unread_only: bool = False,
    ) -> list[Notification]: ...

    @abstractmethod
    def mark_notification_read(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> Notification: ...

    @abstractmethod
    def mark_all_notifications_read(self, user_id: uuid.UUID) -> int: ...

    @abstractmethod
    def count_unread_notifications(self, user_id: uuid.UUID) -> int: ...

    # Shared behaviour built on the primitives above

    def list_admins(self) -> list[User]:
        return [user for user in self.list_users() if user.role == "admin"]

    def get_reporter_info(self, user_id: uuid.UUID) -> dict:
        return reporter_summary(self.get_user(user_id))

    def item_with_user(self, item: Union[LostItem, FoundItem]) -> dict:
        """Item fields plus the reporter's name and university id under ``user``."""
        data = item.model_dump()
        data["user"] = self.get_reporter_info(item.user_id)
        return data

    def get_match_request_with_items(self, match_id: uuid.UUID) -> Optional[MatchRequestWithItems]:
        match = self.get_match_request(match_id)
        if not match:
            return None
        return self._enrich(match)

    def list_match_requests(self) -> list[MatchRequestWithItems]:
        return self._enrich_all(self.list_raw_match_requests())

    def list_pending_match_requests(self) -> list[MatchRequestWithItems]:
        return self._enrich_all(self.list_raw_match_requests(status="pending"))

    def list_user_match_requests(self, user_id: uuid.UUID) -> list[MatchRequestWithItems]:
        return [
            match
            for match in self.list_match_requests()
            if match.lost_item.user_id == user_id or match.found_item.user_id == user_id
        ]

    def get_stats(self) -> dict:
        matches = self.list_raw_match_requests()
        total_matches = len(matches)
        approved = sum(1 for match in matches if match.status == "approved")
        pending = sum(1 for match in matches if match.status == "pending")

        success_rate = 0
        if total_matches > 0:
            success_rate = int(approved * 100 / total_matches + 0.5)

        return {
            "total_lost": len(self.list_lost_items()),
            "total_found": len(self.list_found_items()),
            "pending_matches": pending,
            "success_rate": success_rate,
        }

    def _enrich(self, match: MatchRequest) -> MatchRequestWithItems:
        lost_item = self.get_lost_item(match.lost_id)
        if not lost_item:
            raise ReferentialIntegrityError(match.id, "lost item")

        found_item = self.get_found_item(match.found_id)
        if not found_item:
            raise ReferentialIntegrityError(match.id, "found item")

        return MatchRequestWithItems(
            match=match,
            lost_item=lost_item,
            found_item=found_item,
            lost_user=self.get_reporter_info(lost_item.user_id),
            found_user=self.get_reporter_info(found_item.user_id),
        )

    def _enrich_all(self, matches: Iterable[MatchRequest]) -> list[MatchRequestWithItems]:
        enriched = []
        for match in matches:
            try:
                enriched.append(self._enrich(match))
            except ReferentialIntegrityError as e:
                logger.warning("Skipping match request: %s", e)
        return enriched


def matches_filters(item, category: Optional[str], location: Optional[str], search: Optional[str]) -> bool:
    if category and category != ALL_CATEGORIES and item.category != category:
        return False
    if location and location != ALL_LOCATIONS and item.location != location:
        return False
    if search:
        needle = search.lower()
        if needle not in item.title.lower() and needle not in item.description.lower():
            return False
    return True
