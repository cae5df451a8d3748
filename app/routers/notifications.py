import uuid
from fastapi import APIRouter, Depends

from app.db.db import get_repository
from app.models.user import User
from app.repository.base import Repository
from app.utils.auth_helper import get_authenticated_user


router = APIRouter()

@router.get("/")
async def get_my_notifications(
    limit: int = 50,
    unread_only: bool = False,
    user: User = Depends(get_authenticated_user),
    repository: Repository = Depends(get_repository),
):
    notifications = repository.list_user_notifications(user.id, limit=limit, unread_only=unread_only)

    return {"notifications": notifications}

@router.get("/count")
async def get_unread_notifications_count(
    user: User = Depends(get_authenticated_user),
    repository: Repository = Depends(get_repository),
):
    count = repository.count_unread_notifications(user.id)

    return { "count": count }

@router.post("/{id}/mark-read")
async def mark_notification_read(
    id: uuid.UUID,
    user: User = Depends(get_authenticated_user),
    repository: Repository = Depends(get_repository),
):
    repository.mark_notification_read(id, user.id)

    return {"ok": True}

@router.post("/mark-all-read")
async def mark_all_notifications_read(
    user: User = Depends(get_authenticated_user),
    repository: Repository = Depends(get_repository),
):
    updated = repository.mark_all_notifications_read(user.id)

    return {"ok": True, "updated": updated}
