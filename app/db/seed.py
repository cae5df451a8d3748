"""Demo data for local development: one admin, three students, a few items.

Applied only when the store has no users yet.
"""

import logging
from datetime import datetime, timezone

from app.matching.engine import MatchingEngine
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.user import User
from app.repository.base import Repository
from app.utils.notifier import Notifier
from app.utils.password import hash_password

logger = logging.getLogger(__name__)

STUDENTS = [
    ("Ali Smith", "ali@university.test", "U2025-001"),
    ("Sara Martinez", "sara@university.test", "U2025-002"),
    ("Bilal Khan", "bilal@university.test", "U2025-003"),
]

LOST_ITEMS = [
    ("iPhone 13 Pro", "Electronics", "Black iPhone with blue case, lost near library", "Main Library", "2024-12-15"),
    ("Black Backpack", "Bags & Accessories", "Nike backpack with laptop inside", "Student Center", "2024-12-12"),
    ("Calculus Textbook", "Books & Documents", "Red cover, name written inside", "Engineering Building", "2024-12-10"),
]

FOUND_ITEMS = [
    ("Black iPhone", "Electronics", "Found near library entrance, has blue case", "Main Library", "2024-12-15"),
    ("Denim Jacket", "Clothing", "Light blue denim jacket, size M", "Cafeteria", "2024-12-14"),
    ("Student ID Card", "Keys & Cards", "University ID with blue lanyard", "Student Center", "2024-12-11"),
]


def _day(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def seed_repository(repository: Repository) -> bool:
    if repository.list_users():
        logger.info("Store already seeded, skipping...")
        return False

    logger.info("Starting seed...")

    repository.create_user(
        User(
            name="Admin User",
            email="admin@university.test",
            university_id="ADMIN-001",
            password_hash=hash_password("Admin@123"),
            role="admin",
            verified=True,
        )
    )

    students = [
        repository.create_user(
            User(
                name=name,
                email=email,
                university_id=university_id,
                password_hash=hash_password("Student@123"),
                role="student",
                verified=True,
            )
        )
        for name, email, university_id in STUDENTS
    ]

    for index, (title, category, description, location, day) in enumerate(LOST_ITEMS):
        repository.create_lost_item(
            LostItem(
                user_id=students[index].id,
                title=title,
                category=category,
                description=description,
                location=location,
                date_lost=_day(day),
            )
        )

    # finders are shifted by one so nobody finds their own item
    for index, (title, category, description, location, day) in enumerate(FOUND_ITEMS):
        repository.create_found_item(
            FoundItem(
                user_id=students[(index + 1) % len(students)].id,
                title=title,
                category=category,
                description=description,
                location=location,
                date_found=_day(day),
            )
        )

    MatchingEngine(repository, Notifier(repository)).generate_all_matches()

    logger.info("Seed completed")
    return True
