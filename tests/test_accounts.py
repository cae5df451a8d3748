import pytest

from app.errors import ValidationError
from app.services.accounts import AccountService, InvalidCredentialsError, UnverifiedAccountError
from app.utils.password import hash_password, verify_password
from app.utils.university_connector import is_university_email, verify_student_with_university_api


@pytest.fixture
def accounts(repository, notifier):
    return AccountService(repository, notifier)


def test_password_round_trip():
    hashed = hash_password("Student@123")

    assert hashed != "Student@123"
    assert verify_password("Student@123", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert verify_password("Student@123", "not-a-hash") is False


def test_university_stub():
    assert verify_student_with_university_api("U2025-001") is True
    assert verify_student_with_university_api("X-999") is False
    assert is_university_email("ali@University.Test") is True
    assert is_university_email("ali@gmail.com") is False
    assert is_university_email("no-at-sign") is False


def test_university_domains_from_env(monkeypatch):
    monkeypatch.setenv("UNIVERSITY_EMAIL_DOMAINS", "campus.edu")

    assert is_university_email("ali@campus.edu") is True
    assert is_university_email("ali@university.test") is False


def test_signup_university_email_is_auto_verified(accounts):
    user = accounts.signup("Dana", "dana@student.university.test", "U2025-004", "Student@123")

    assert user.verified is True
    assert user.role == "student"
    assert user.password_hash != "Student@123"


def test_signup_other_email_waits_for_verification(repository, accounts):
    user = accounts.signup("Eve", "eve@gmail.com", "U2025-005", "Student@123")

    assert user.verified is False
    assert [u.id for u in repository.list_pending_users()] == [user.id]


def test_signup_rejects_unknown_university_id(accounts):
    with pytest.raises(ValidationError):
        accounts.signup("Mallory", "mallory@university.test", "FAKE-1", "Student@123")


def test_signup_rejects_duplicate_email(accounts):
    accounts.signup("Dana", "dana@university.test", "U2025-004", "Student@123")

    with pytest.raises(ValidationError):
        accounts.signup("Dana Again", "dana@university.test", "U2025-004", "Student@123")


def test_authenticate(accounts):
    accounts.signup("Dana", "dana@university.test", "U2025-004", "Student@123")

    assert accounts.authenticate("dana@university.test", "Student@123").name == "Dana"

    with pytest.raises(InvalidCredentialsError):
        accounts.authenticate("dana@university.test", "nope")
    with pytest.raises(InvalidCredentialsError):
        accounts.authenticate("ghost@university.test", "Student@123")


def test_unverified_cannot_log_in_until_verified(repository, accounts):
    user = accounts.signup("Eve", "eve@gmail.com", "U2025-005", "Student@123")

    with pytest.raises(UnverifiedAccountError):
        accounts.authenticate("eve@gmail.com", "Student@123")

    accounts.verify_user(user.id)

    assert accounts.authenticate("eve@gmail.com", "Student@123").verified is True
    assert [n.title for n in repository.list_user_notifications(user.id)] == ["Account Verified!"]
