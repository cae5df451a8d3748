import uuid
from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class FoundItem(SQLModel, table=True):
    __tablename__ = "found_items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Finder info
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    # Item fields
    title: str
    category: str
    description: str
    location: str
    date_found: datetime
    image_path: Optional[str] = Field(default=None)

    status: str = Field(default="pending", index=True)  # pending, matched, returned, closed
