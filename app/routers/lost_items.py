import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Form, HTTPException
from pydantic import BaseModel

from app.db.db import get_repository
from app.dependencies import get_item_service
from app.models.user import User
from app.repository.base import Repository
from app.services.items import ItemService
from app.utils.auth_helper import get_authenticated_user
from app.utils.form_validator import validate_create_item_form

router = APIRouter()


class ItemStatusUpdate(BaseModel):
    status: str


@router.post("/", status_code=201)
def add_lost_item(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    date_lost: str = Form(...),
    location: str = Form(...),
    image_path: Optional[str] = Form(None),
    user: User = Depends(get_authenticated_user),
    service: ItemService = Depends(get_item_service),
):
    form = validate_create_item_form(
        item_type="lost",
        title=title,
        description=description,
        category=category,
        date=date_lost,
        location=location,
        image_path=image_path,
    )

    lost_item, matches = service.report_lost_item(user.id, form)

    return {
        "item": lost_item,
        "matches_created": len(matches),
    }


@router.get("/")
def get_lost_items(
    category: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    repository: Repository = Depends(get_repository),
):
    items = repository.list_lost_items(category=category, location=location, search=search)

    return [repository.item_with_user(item) for item in items]


@router.get("/my")
def get_my_lost_items(
    user: User = Depends(get_authenticated_user),
    repository: Repository = Depends(get_repository),
):
    return repository.list_user_lost_items(user.id)


@router.get("/{item_id}")
def get_lost_item(
    item_id: uuid.UUID,
    repository: Repository = Depends(get_repository),
):
    lost_item = repository.get_lost_item(item_id)
    if not lost_item:
        raise HTTPException(status_code=404, detail="Lost item not found")

    return repository.item_with_user(lost_item)


@router.patch("/{item_id}/status")
def update_lost_item_status(
    item_id: uuid.UUID,
    payload: ItemStatusUpdate,
    user: User = Depends(get_authenticated_user),
    service: ItemService = Depends(get_item_service),
):
    return service.set_lost_item_status(item_id, user.id, payload.status)


@router.delete("/{item_id}")
def delete_lost_item(
    item_id: uuid.UUID,
    user: User = Depends(get_authenticated_user),
    service: ItemService = Depends(get_item_service),
):
    service.remove_lost_item(item_id, user.id)

    return {"ok": True}
