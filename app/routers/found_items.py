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
def add_found_item(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    date_found: str = Form(...),
    location: str = Form(...),
    image_path: Optional[str] = Form(None),
    user: User = Depends(get_authenticated_user),
    service: ItemService = Depends(get_item_service),
):
    form = validate_create_item_form(
        item_type="found",
        title=title,
        description=description,
        category=category,
        date=date_found,
        location=location,
        image_path=image_path,
    )

    found_item, matches = service.report_found_item(user.id, form)

    return {
        "item": found_item,
        "matches_created": len(matches),
    }


@router.get("/")
def get_found_items(
    category: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    repository: Repository = Depends(get_repository),
):
    items = repository.list_found_items(category=category, location=location, search=search)

    return [repository.item_with_user(item) for item in items]


@router.get("/my")
def get_my_found_items(
    user: User = Depends(get_authenticated_user),
    repository: Repository = Depends(get_repository),
):
    return repository.list_user_found_items(user.id)


@router.get("/{item_id}")
def get_found_item(
    item_id: uuid.UUID,
    repository: Repository = Depends(get_repository),
):
    found_item = repository.get_found_item(item_id)
    if not found_item:
        raise HTTPException(status_code=404, detail="Found item not found")

    return repository.item_with_user(found_item)


@router.patch("/{item_id}/status")
def update_found_item_status(
    item_id: uuid.UUID,
    payload: ItemStatusUpdate,
    user: User = Depends(get_authenticated_user),
    service: ItemService = Depends(get_item_service),
):
    return service.set_found_item_status(item_id, user.id, payload.status)


@router.delete("/{item_id}")
def delete_found_item(
    item_id: uuid.UUID,
    user: User = Depends(get_authenticated_user),
    service: ItemService = Depends(get_item_service),
):
    service.remove_found_item(item_id, user.id)

    return {"ok": True}
