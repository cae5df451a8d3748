import uuid
from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    name: str
    email: str = Field(index=True, unique=True)
    university_id: str
    password_hash: str

    role: str = Field(default="student")  # Possible roles: student, admin
    verified: bool = Field(default=False)


def reporter_summary(user: Optional[User]) -> dict:
    """Public identity shown next to an item; "Unknown" once the account is gone."""
    if not user:
        return {"name": "Unknown", "university_id": "Unknown"}
    return {"name": user.name, "university_id": user.university_id}
