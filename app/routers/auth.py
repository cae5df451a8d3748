import uuid
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.dependencies import get_account_service
from app.models.user import User
from app.services.accounts import AccountService
from app.utils.auth_helper import create_access_token, get_authenticated_user

router = APIRouter()


class SignupRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    university_id: str = Field(min_length=1)
    password: str = Field(min_length=8, description="Password must be at least 8 characters")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: str
    verified: bool
    university_id: str


class TokenResponse(BaseModel):
    access_token: str
    user: UserResponse


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        verified=user.verified,
        university_id=user.university_id,
    )


@router.post("/signup", status_code=201)
def signup(payload: SignupRequest, service: AccountService = Depends(get_account_service)):
    user = service.signup(
        name=payload.name.strip(),
        email=payload.email.strip().lower(),
        university_id=payload.university_id.strip(),
        password=payload.password,
    )

    message = "Account created successfully" if user.verified else "Account created. Waiting for admin verification."

    return {
        "message": message,
        "user": to_user_response(user),
    }


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, service: AccountService = Depends(get_account_service)):
    user = service.authenticate(payload.email.strip().lower(), payload.password)

    return TokenResponse(
        access_token=create_access_token(user),
        user=to_user_response(user),
    )


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_authenticated_user)):
    return to_user_response(user)
