from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    # Ownership
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    # Notification fields
    title: str
    body: str
    link: Optional[str] = Field(default=None)  # deep link into the dashboard or admin review page

    is_read: bool = Field(default=False)
