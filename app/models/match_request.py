import uuid
from dataclasses import dataclass, field
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.user import reporter_summary


class MatchRequest(SQLModel, table=True):
    __tablename__ = "match_requests"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Linked reports
    lost_id: uuid.UUID = Field(foreign_key="lost_items.id", index=True)
    found_id: uuid.UUID = Field(foreign_key="found_items.id", index=True)

    score: int = Field(ge=0, le=100)
    status: str = Field(default="pending", index=True)  # values: "pending", "approved", "rejected"


@dataclass
class MatchRequestWithItems:
    match: MatchRequest
    lost_item: LostItem
    found_item: FoundItem
    lost_user: dict = field(default_factory=lambda: reporter_summary(None))
    found_user: dict = field(default_factory=lambda: reporter_summary(None))

    @property
    def id(self) -> uuid.UUID:
        return self.match.id

    @property
    def status(self) -> str:
        return self.match.status

    def to_dict(self) -> dict:
        data = self.match.model_dump()
        data["lost_item"] = {**self.lost_item.model_dump(), "user": self.lost_user}
        data["found_item"] = {**self.found_item.model_dump(), "user": self.found_user}
        return data
