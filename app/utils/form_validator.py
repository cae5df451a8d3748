from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from app.errors import ValidationError


class ValidatedCreateItem(BaseModel):
    item_type: Literal["lost", "found"]
    title: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=3, max_length=1000)
    category: str = Field(min_length=2, max_length=50)
    date: datetime
    location: str = Field(min_length=2, max_length=100)
    image_path: Optional[str] = Field(default=None, max_length=500)


def parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise ValidationError("Date not parseable")


def validate_create_item_form(
    item_type: str,
    title: str,
    description: str,
    category: str,
    date: str,
    location: str,
    image_path: Optional[str] = None,
) -> ValidatedCreateItem:
    parsed_date = parse_date(date)

    try:
        return ValidatedCreateItem(
            item_type=item_type,
            title=title.strip(),
            description=description.strip(),
            category=category.strip(),
            date=parsed_date,
            location=location.strip(),
            image_path=image_path.strip() or None if image_path else None,
        )
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", details=e.errors(include_url=False, include_context=False))
