import logging
import uuid

from app.errors import PermissionDeniedError, ValidationError
from app.models.enums import UserRole
from app.models.user import User
from app.repository.base import Repository
from app.utils.notifier import Dispatch, Notifier, dispatch_inline
from app.utils.password import hash_password, verify_password
from app.utils.university_connector import is_university_email, verify_student_with_university_api

logger = logging.getLogger(__name__)


class InvalidCredentialsError(PermissionDeniedError):
    pass


class UnverifiedAccountError(PermissionDeniedError):
    pass


class AccountService:
    def __init__(self, repository: Repository, notifier: Notifier, dispatch: Dispatch = dispatch_inline):
        self.repository = repository
        self.notifier = notifier
        self.dispatch = dispatch

    def signup(self, name: str, email: str, university_id: str, password: str) -> User:
        if self.repository.get_user_by_email(email):
            raise ValidationError("User with this email already exists")

        if not verify_student_with_university_api(university_id):
            raise ValidationError("Invalid university ID. Please check with your institution.")

        user = self.repository.create_user(
            User(
                name=name,
                email=email,
                university_id=university_id,
                password_hash=hash_password(password),
                role=UserRole.STUDENT.value,
                verified=is_university_email(email),
            )
        )
        logger.info("User %s signed up (verified=%s)", user.id, user.verified)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.repository.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid email or password")

        if not user.verified:
            raise UnverifiedAccountError("Account not verified. Please wait for admin approval.")

        return user

    def verify_user(self, user_id: uuid.UUID) -> User:
        user = self.repository.verify_user(user_id)
        logger.info("User %s verified", user_id)

        self.dispatch(self.notifier.notify_user_verification, user_id)
        return user
