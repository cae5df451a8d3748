import os
import uuid
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

from app.db.db import get_repository
from app.models.user import User
from app.repository.base import Repository

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 7 * 24 * 60  # 7 days


def _secret_key() -> str:
    return os.getenv("JWT_SECRET", "development-only-secret-change-me")


def create_access_token(user: User) -> str:
    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }

    return jwt.encode(payload, _secret_key(), algorithm=ALGORITHM)


bearer_scheme_required = HTTPBearer(auto_error=True)

def get_current_user_required(token: HTTPAuthorizationCredentials = Depends(bearer_scheme_required)):
    try:
        payload = jwt.decode(
            token.credentials,
            _secret_key(),
            algorithms=[ALGORITHM],
        )
        return payload
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def get_db_user(repository: Repository, current_user) -> User:
    try:
        user_id = uuid.UUID(current_user["sub"])
    except (KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = repository.get_user(user_id)

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user


def get_authenticated_user(
    repository: Repository = Depends(get_repository),
    current_user=Depends(get_current_user_required),
) -> User:
    return get_db_user(repository, current_user)


def require_admin(user: User = Depends(get_authenticated_user)) -> User:
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
