import uuid
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.db.db import get_repository
from app.dependencies import get_account_service
from app.models.user import User
from app.repository.base import Repository
from app.services.accounts import AccountService
from app.utils.auth_helper import require_admin

router = APIRouter()


# Response Models
class OverviewStats(BaseModel):
    total_lost: int
    total_found: int
    pending_matches: int
    success_rate: int


class UserDetail(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    university_id: str
    role: str
    verified: bool
    created_at: datetime


def to_user_detail(user: User) -> UserDetail:
    return UserDetail(
        id=user.id,
        name=user.name,
        email=user.email,
        university_id=user.university_id,
        role=user.role,
        verified=user.verified,
        created_at=user.created_at,
    )


@router.get("/users", response_model=List[UserDetail])
def get_users(
    repository: Repository = Depends(get_repository),
    admin: User = Depends(require_admin),
):
    """All registered users, without credential hashes"""
    return [to_user_detail(user) for user in repository.list_users()]


@router.get("/users/pending", response_model=List[UserDetail])
def get_pending_users(
    repository: Repository = Depends(get_repository),
    admin: User = Depends(require_admin),
):
    """Users waiting for verification"""
    return [to_user_detail(user) for user in repository.list_pending_users()]


@router.post("/users/{user_id}/verify")
def verify_user(
    user_id: uuid.UUID,
    service: AccountService = Depends(get_account_service),
    admin: User = Depends(require_admin),
):
    user = service.verify_user(user_id)

    return {
        "message": "User verified successfully",
        "user": to_user_detail(user),
    }


@router.get("/stats", response_model=OverviewStats)
def get_overview_stats(
    repository: Repository = Depends(get_repository),
    admin: User = Depends(require_admin),
):
    """Overview statistics for the admin dashboard"""
    return OverviewStats(**repository.get_stats())
