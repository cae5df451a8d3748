import logging
import uuid
from typing import Union

from app.errors import NotFoundError, PermissionDeniedError, ValidationError
from app.matching.engine import MatchingEngine
from app.models.enums import ItemStatus
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.match_request import MatchRequest
from app.repository.base import Repository
from app.services.transitions import OWNER_ITEM_TARGETS, ensure_item_transition
from app.utils.form_validator import ValidatedCreateItem

logger = logging.getLogger(__name__)

Item = Union[LostItem, FoundItem]


class ItemService:
    """Reporting and owner-side lifecycle of lost and found items."""

    def __init__(self, repository: Repository, engine: MatchingEngine):
        self.repository = repository
        self.engine = engine

    def report_lost_item(self, user_id: uuid.UUID, form: ValidatedCreateItem) -> tuple[LostItem, list[MatchRequest]]:
        lost_item = self.repository.create_lost_item(
            LostItem(
                user_id=user_id,
                title=form.title,
                category=form.category,
                description=form.description,
                location=form.location,
                date_lost=form.date,
                image_path=form.image_path,
            )
        )
        logger.info("Lost item %s reported by %s", lost_item.id, user_id)

        return lost_item, self.engine.match_lost_item(lost_item)

    def report_found_item(self, user_id: uuid.UUID, form: ValidatedCreateItem) -> tuple[FoundItem, list[MatchRequest]]:
        found_item = self.repository.create_found_item(
            FoundItem(
                user_id=user_id,
                title=form.title,
                category=form.category,
                description=form.description,
                location=form.location,
                date_found=form.date,
                image_path=form.image_path,
            )
        )
        logger.info("Found item %s reported by %s", found_item.id, user_id)

        return found_item, self.engine.match_found_item(found_item)

    def report(self, user_id: uuid.UUID, form: ValidatedCreateItem) -> tuple[Item, list[MatchRequest]]:
        if form.item_type == "lost":
            return self.report_lost_item(user_id, form)
        return self.report_found_item(user_id, form)

    def remove_lost_item(self, item_id: uuid.UUID, user_id: uuid.UUID) -> None:
        item = self._owned(self.repository.get_lost_item(item_id), "Lost item", item_id, user_id)
        self._ensure_removable(item)
        self.repository.delete_lost_item(item_id)

    def remove_found_item(self, item_id: uuid.UUID, user_id: uuid.UUID) -> None:
        item = self._owned(self.repository.get_found_item(item_id), "Found item", item_id, user_id)
        self._ensure_removable(item)
        self.repository.delete_found_item(item_id)

    def set_lost_item_status(self, item_id: uuid.UUID, user_id: uuid.UUID, status: str) -> LostItem:
        item = self._owned(self.repository.get_lost_item(item_id), "Lost item", item_id, user_id)
        target = self._owner_target(item, status)
        return self.repository.update_lost_item_status(item_id, target.value)

    def set_found_item_status(self, item_id: uuid.UUID, user_id: uuid.UUID, status: str) -> FoundItem:
        item = self._owned(self.repository.get_found_item(item_id), "Found item", item_id, user_id)
        target = self._owner_target(item, status)
        return self.repository.update_found_item_status(item_id, target.value)

    @staticmethod
    def _owned(item, label: str, item_id: uuid.UUID, user_id: uuid.UUID):
        if not item:
            raise NotFoundError(label, item_id)
        if item.user_id != user_id:
            raise PermissionDeniedError(f"Unauthorized to modify this {label.lower()}")
        return item

    @staticmethod
    def _ensure_removable(item: Item) -> None:
        if item.status != ItemStatus.PENDING.value:
            raise ValidationError("Only pending items can be removed")

    @staticmethod
    def _owner_target(item: Item, status: str) -> ItemStatus:
        target = ensure_item_transition(item.status, status)
        if target not in OWNER_ITEM_TARGETS:
            raise ValidationError(f"Status '{status}' cannot be set directly")
        return target
