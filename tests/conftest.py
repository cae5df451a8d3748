"""Shared fixtures: an in-memory repository, a few users and item factories.

Usage:
    def test_something(repository, owner, finder, make_lost_item):
        lost = make_lost_item(title="Blue umbrella")
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.db.db import get_repository
from app.main import app
from app.matching.engine import MatchingEngine
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.user import User
from app.repository.memory import InMemoryRepository
from app.services.match_review import MatchReviewService
from app.utils.auth_helper import create_access_token
from app.utils.notifier import Notifier

DAY0 = datetime(2024, 12, 15, 10, 0, tzinfo=timezone.utc)


def make_user(repository, name, email, role="student", verified=True, university_id="U2025-001"):
    return repository.create_user(
        User(
            name=name,
            email=email,
            university_id=university_id,
            password_hash="not-a-real-hash",
            role=role,
            verified=verified,
        )
    )


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def owner(repository):
    return make_user(repository, "Ali Smith", "ali@university.test")


@pytest.fixture
def finder(repository):
    return make_user(repository, "Sara Martinez", "sara@university.test", university_id="U2025-002")


@pytest.fixture
def admin(repository):
    return make_user(repository, "Admin User", "admin@university.test", role="admin", university_id="ADMIN-001")


@pytest.fixture
def make_lost_item(repository, owner):
    def _make(**overrides):
        fields = {
            "user_id": owner.id,
            "title": "iPhone",
            "category": "Electronics",
            "description": "black iphone blue case",
            "location": "Main Library",
            "date_lost": DAY0,
            "image_path": "uploads/lost-iphone.jpg",
        }
        fields.update(overrides)
        return repository.create_lost_item(LostItem(**fields))

    return _make


@pytest.fixture
def make_found_item(repository, finder):
    def _make(**overrides):
        fields = {
            "user_id": finder.id,
            "title": "iPhone",
            "category": "Electronics",
            "description": "black iphone blue case found",
            "location": "Main Library",
            "date_found": DAY0,
            "image_path": "uploads/found-iphone.jpg",
        }
        fields.update(overrides)
        return repository.create_found_item(FoundItem(**fields))

    return _make


@pytest.fixture
def notifier(repository):
    return Notifier(repository)


@pytest.fixture
def engine(repository, notifier):
    return MatchingEngine(repository, notifier)


@pytest.fixture
def review_service(repository, notifier):
    return MatchReviewService(repository, notifier)


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}
