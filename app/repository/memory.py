import threading
import uuid
from typing import Optional

from app.errors import NotFoundError
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.match_request import MatchRequest
from app.models.notification import Notification
from app.models.user import User
from app.repository.base import Repository, matches_filters


class InMemoryRepository(Repository):
    """Dict-backed store used for local development and tests.

    Sync routes run in a threadpool and notifications are written from
    background tasks, so every method holds ``_lock`` and scans work on a
    snapshot of the dict values.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.users: dict[uuid.UUID, User] = {}
        self.lost_items: dict[uuid.UUID, LostItem] = {}
        self.found_items: dict[uuid.UUID, FoundItem] = {}
        self.match_requests: dict[uuid.UUID, MatchRequest] = {}
        self.notifications: dict[uuid.UUID, Notification] = {}

    # Users
    def get_user(self, user_id):
        with self._lock:
            return self.users.get(user_id)

    def get_user_by_email(self, email):
        with self._lock:
            users = list(self.users.values())
        return next((user for user in users if user.email == email), None)

    def create_user(self, user):
        with self._lock:
            self.users[user.id] = user
        return user

    def verify_user(self, user_id):
        with self._lock:
            user = self.users.get(user_id)
            if not user:
                raise NotFoundError("User", user_id)
            user.verified = True
            return user

    def list_users(self):
        with self._lock:
            return list(self.users.values())

    def list_pending_users(self):
        return [user for user in self.list_users() if not user.verified]

    # Lost items
    def create_lost_item(self, item):
        with self._lock:
            self.lost_items[item.id] = item
        return item

    def list_lost_items(self, category=None, location=None, search=None):
        with self._lock:
            items = list(self.lost_items.values())
        return [item for item in items if matches_filters(item, category, location, search)]

    def get_lost_item(self, item_id):
        with self._lock:
            return self.lost_items.get(item_id)

    def list_user_lost_items(self, user_id):
        with self._lock:
            items = list(self.lost_items.values())
        return [item for item in items if item.user_id == user_id]

    def delete_lost_item(self, item_id):
        with self._lock:
            if self.lost_items.pop(item_id, None) is None:
                raise NotFoundError("Lost item", item_id)

    def update_lost_item_status(self, item_id, status):
        with self._lock:
            item = self.lost_items.get(item_id)
            if not item:
                raise NotFoundError("Lost item", item_id)
            item.status = status
            return item

    # Found items
    def create_found_item(self, item):
        with self._lock:
            self.found_items[item.id] = item
        return item

    def list_found_items(self, category=None, location=None, search=None):
        with self._lock:
            items = list(self.found_items.values())
        return [item for item in items if matches_filters(item, category, location, search)]

    def get_found_item(self, item_id):
        with self._lock:
            return self.found_items.get(item_id)

    def list_user_found_items(self, user_id):
        with self._lock:
            items = list(self.found_items.values())
        return [item for item in items if item.user_id == user_id]

    def delete_found_item(self, item_id):
        with self._lock:
            if self.found_items.pop(item_id, None) is None:
                raise NotFoundError("Found item", item_id)

    def update_found_item_status(self, item_id, status):
        with self._lock:
            item = self.found_items.get(item_id)
            if not item:
                raise NotFoundError("Found item", item_id)
            item.status = status
            return item

    # Match requests
    def create_match_request(self, match):
        with self._lock:
            self.match_requests[match.id] = match
        return match

    def get_match_request(self, match_id):
        with self._lock:
            return self.match_requests.get(match_id)

    def list_raw_match_requests(self, status: Optional[str] = None):
        with self._lock:
            matches = list(self.match_requests.values())
        return [match for match in matches if status is None or match.status == status]

    def update_match_request_status(self, match_id, status):
        with self._lock:
            match = self.match_requests.get(match_id)
            if not match:
                raise NotFoundError("Match request", match_id)
            match.status = status
            return match

    # Notifications
    def create_notification(self, notification):
        with self._lock:
            self.notifications[notification.id] = notification
        return notification

    def list_user_notifications(self, user_id, limit=None, unread_only=False):
        with self._lock:
            snapshot = list(self.notifications.values())

        # reversed() first so equal timestamps still come back newest first
        notifications = [
            notif
            for notif in reversed(snapshot)
            if notif.user_id == user_id and not (unread_only and notif.is_read)
        ]
        notifications.sort(key=lambda notif: notif.created_at, reverse=True)

        if limit is not None:
            notifications = notifications[:limit]
        return notifications

    def mark_notification_read(self, notification_id, user_id):
        with self._lock:
            notif = self.notifications.get(notification_id)
            if not notif or notif.user_id != user_id:
                raise NotFoundError("Notification", notification_id)
            notif.is_read = True
            return notif

    def mark_all_notifications_read(self, user_id):
        with self._lock:
            unread = [notif for notif in self.notifications.values() if notif.user_id == user_id and not notif.is_read]
            for notif in unread:
                notif.is_read = True
        return len(unread)

    def count_unread_notifications(self, user_id):
        with self._lock:
            notifications = list(self.notifications.values())
        return sum(1 for notif in notifications if notif.user_id == user_id and not notif.is_read)
