import functools
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, func, or_, select

from app.errors import NotFoundError, RepositoryError
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.match_request import MatchRequest
from app.models.notification import Notification
from app.models.user import User
from app.repository.base import ALL_CATEGORIES, ALL_LOCATIONS, Repository

logger = logging.getLogger(__name__)


def _storage_errors(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("Storage failure in %s", method.__name__)
            raise RepositoryError(f"{method.__name__} failed: {e}") from e

    return wrapper


class SQLRepository(Repository):
    """SQLModel-backed store, one short-lived session per operation."""

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def _add(self, record):
        with self._session() as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def _get(self, model, record_id):
        with self._session() as session:
            return session.get(model, record_id)

    def _all(self, query):
        with self._session() as session:
            return list(session.exec(query).all())

    def _update_status(self, model, label: str, record_id, status: str):
        with self._session() as session:
            record = session.get(model, record_id)
            if not record:
                raise NotFoundError(label, record_id)

            record.status = status
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def _delete(self, model, label: str, record_id):
        with self._session() as session:
            record = session.get(model, record_id)
            if not record:
                raise NotFoundError(label, record_id)

            session.delete(record)
            session.commit()

    @staticmethod
    def _filtered(model, category, location, search):
        query = select(model).order_by(col(model.created_at).desc())

        if category and category != ALL_CATEGORIES:
            query = query.where(model.category == category)
        if location and location != ALL_LOCATIONS:
            query = query.where(model.location == location)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(col(model.title).ilike(pattern), col(model.description).ilike(pattern)))

        return query

    # Users
    @_storage_errors
    def get_user(self, user_id):
        return self._get(User, user_id)

    @_storage_errors
    def get_user_by_email(self, email):
        with self._session() as session:
            return session.exec(select(User).where(User.email == email)).first()

    @_storage_errors
    def create_user(self, user):
        return self._add(user)

    @_storage_errors
    def verify_user(self, user_id):
        with self._session() as session:
            user = session.get(User, user_id)
            if not user:
                raise NotFoundError("User", user_id)

            user.verified = True
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    @_storage_errors
    def list_users(self):
        return self._all(select(User))

    @_storage_errors
    def list_pending_users(self):
        return self._all(select(User).where(User.verified == False))

    # Lost items
    @_storage_errors
    def create_lost_item(self, item):
        return self._add(item)

    @_storage_errors
    def list_lost_items(self, category=None, location=None, search=None):
        return self._all(self._filtered(LostItem, category, location, search))

    @_storage_errors
    def get_lost_item(self, item_id):
        return self._get(LostItem, item_id)

    @_storage_errors
    def list_user_lost_items(self, user_id):
        return self._all(
            select(LostItem)
            .where(LostItem.user_id == user_id)
            .order_by(col(LostItem.created_at).desc())
        )

    @_storage_errors
    def delete_lost_item(self, item_id):
        self._delete(LostItem, "Lost item", item_id)

    @_storage_errors
    def update_lost_item_status(self, item_id, status):
        return self._update_status(LostItem, "Lost item", item_id, status)

    # Found items
    @_storage_errors
    def create_found_item(self, item):
        return self._add(item)

    @_storage_errors
    def list_found_items(self, category=None, location=None, search=None):
        return self._all(self._filtered(FoundItem, category, location, search))

    @_storage_errors
    def get_found_item(self, item_id):
        return self._get(FoundItem, item_id)

    @_storage_errors
    def list_user_found_items(self, user_id):
        return self._all(
            select(FoundItem)
            .where(FoundItem.user_id == user_id)
            .order_by(col(FoundItem.created_at).desc())
        )

    @_storage_errors
    def delete_found_item(self, item_id):
        self._delete(FoundItem, "Found item", item_id)

    @_storage_errors
    def update_found_item_status(self, item_id, status):
        return self._update_status(FoundItem, "Found item", item_id, status)

    # Match requests
    @_storage_errors
    def create_match_request(self, match):
        return self._add(match)

    @_storage_errors
    def get_match_request(self, match_id):
        return self._get(MatchRequest, match_id)

    @_storage_errors
    def list_raw_match_requests(self, status: Optional[str] = None):
        query = select(MatchRequest).order_by(col(MatchRequest.created_at).desc())

        if status:
            query = query.where(MatchRequest.status == status)

        return self._all(query)

    @_storage_errors
    def update_match_request_status(self, match_id, status):
        return self._update_status(MatchRequest, "Match request", match_id, status)

    # Notifications
    @_storage_errors
    def create_notification(self, notification):
        return self._add(notification)

    @_storage_errors
    def list_user_notifications(self, user_id, limit=None, unread_only=False):
        query = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(col(Notification.created_at).desc())
        )

        if unread_only:
            query = query.where(Notification.is_read == False)
        if limit is not None:
            query = query.limit(limit)

        return self._all(query)

    @_storage_errors
    def mark_notification_read(self, notification_id, user_id):
        with self._session() as session:
            notif = session.exec(
                select(Notification)
                .where(Notification.id == notification_id)
                .where(Notification.user_id == user_id)
            ).first()

            if not notif:
                raise NotFoundError("Notification", notification_id)

            notif.is_read = True
            session.add(notif)
            session.commit()
            session.refresh(notif)
            return notif

    @_storage_errors
    def mark_all_notifications_read(self, user_id):
        with self._session() as session:
            notifications = session.exec(
                select(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.is_read == False)
            ).all()

            for notif in notifications:
                notif.is_read = True
                session.add(notif)

            session.commit()
            return len(notifications)

    @_storage_errors
    def count_unread_notifications(self, user_id):
        with self._session() as session:
            return session.exec(
                select(func.count(Notification.id))
                .where(Notification.user_id == user_id)
                .where(Notification.is_read == False)
            ).one()
