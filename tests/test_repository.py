import logging
import threading
import uuid
from datetime import timedelta

import pytest

from app.db.db import create_db_and_tables, make_engine
from app.errors import NotFoundError
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem
from app.models.match_request import MatchRequest
from app.models.notification import Notification
from app.repository.memory import InMemoryRepository
from app.repository.sql import SQLRepository

from conftest import DAY0, make_user


@pytest.fixture(params=["memory", "database"])
def repo(request, tmp_path):
    if request.param == "memory":
        return InMemoryRepository()

    engine = make_engine(f"sqlite:///{tmp_path / 'lostfound.db'}")
    create_db_and_tables(engine)
    return SQLRepository(engine)


@pytest.fixture
def alice(repo):
    return make_user(repo, "Alice", "alice@university.test")


@pytest.fixture
def bob(repo):
    return make_user(repo, "Bob", "bob@university.test", verified=False)


def lost_item(user, **overrides):
    fields = dict(
        user_id=user.id,
        title="Blue umbrella",
        category="Other",
        description="Folding umbrella with wooden handle",
        location="Cafeteria",
        date_lost=DAY0,
    )
    fields.update(overrides)
    return LostItem(**fields)


def found_item(user, **overrides):
    fields = dict(
        user_id=user.id,
        title="Umbrella",
        category="Other",
        description="Blue umbrella left on a chair",
        location="Cafeteria",
        date_found=DAY0,
    )
    fields.update(overrides)
    return FoundItem(**fields)


class TestUsers:
    def test_lookup_by_email(self, repo, alice):
        assert repo.get_user_by_email("alice@university.test").id == alice.id
        assert repo.get_user_by_email("nobody@university.test") is None

    def test_pending_and_verify(self, repo, alice, bob):
        assert [user.id for user in repo.list_pending_users()] == [bob.id]

        assert repo.verify_user(bob.id).verified is True
        assert repo.list_pending_users() == []

    def test_verify_unknown_user(self, repo):
        with pytest.raises(NotFoundError):
            repo.verify_user(uuid.uuid4())

    def test_list_admins(self, repo, alice):
        admin = make_user(repo, "Admin", "admin@university.test", role="admin")
        assert [user.id for user in repo.list_admins()] == [admin.id]


class TestItems:
    def test_get_missing_returns_none(self, repo):
        assert repo.get_lost_item(uuid.uuid4()) is None
        assert repo.get_found_item(uuid.uuid4()) is None

    def test_filters(self, repo, alice):
        repo.create_lost_item(lost_item(alice))
        repo.create_lost_item(lost_item(alice, title="Calculator", category="Electronics", description="Casio",
                                        location="Main Library"))

        assert len(repo.list_lost_items()) == 2
        assert len(repo.list_lost_items(category="All Categories", location="All Locations")) == 2
        assert [i.title for i in repo.list_lost_items(category="Electronics")] == ["Calculator"]
        assert [i.title for i in repo.list_lost_items(location="Cafeteria")] == ["Blue umbrella"]
        assert [i.title for i in repo.list_lost_items(search="wooden")] == ["Blue umbrella"]
        assert [i.title for i in repo.list_lost_items(search="CASIO")] == ["Calculator"]
        assert repo.list_lost_items(search="bicycle") == []

    def test_found_filters(self, repo, alice):
        repo.create_found_item(found_item(alice))

        assert len(repo.list_found_items(search="chair")) == 1
        assert repo.list_found_items(category="Electronics") == []

    def test_user_items(self, repo, alice, bob):
        repo.create_lost_item(lost_item(alice))
        repo.create_found_item(found_item(bob))

        assert len(repo.list_user_lost_items(alice.id)) == 1
        assert repo.list_user_lost_items(bob.id) == []
        assert len(repo.list_user_found_items(bob.id)) == 1

    def test_update_status(self, repo, alice):
        item = repo.create_lost_item(lost_item(alice))

        repo.update_lost_item_status(item.id, "matched")

        assert repo.get_lost_item(item.id).status == "matched"

    def test_update_missing_raises(self, repo):
        with pytest.raises(NotFoundError):
            repo.update_found_item_status(uuid.uuid4(), "matched")

    def test_delete(self, repo, alice):
        item = repo.create_found_item(found_item(alice))

        repo.delete_found_item(item.id)

        assert repo.get_found_item(item.id) is None
        with pytest.raises(NotFoundError):
            repo.delete_found_item(item.id)


class TestMatchRequests:
    def test_enriched_listing_and_user_scope(self, repo, alice, bob):
        lost = repo.create_lost_item(lost_item(alice))
        found = repo.create_found_item(found_item(bob))
        match = repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=found.id, score=80))

        enriched = repo.list_match_requests()
        assert len(enriched) == 1
        assert enriched[0].id == match.id
        assert enriched[0].lost_item.id == lost.id
        assert enriched[0].found_item.id == found.id

        assert len(repo.list_user_match_requests(alice.id)) == 1
        assert len(repo.list_user_match_requests(bob.id)) == 1
        assert repo.list_user_match_requests(uuid.uuid4()) == []

    def test_pending_listing(self, repo, alice, bob):
        lost = repo.create_lost_item(lost_item(alice))
        found = repo.create_found_item(found_item(bob))
        first = repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=found.id, score=80))
        repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=found.id, score=80))

        repo.update_match_request_status(first.id, "rejected")

        assert len(repo.list_pending_match_requests()) == 1
        assert len(repo.list_match_requests()) == 2

    def test_dangling_reference_is_skipped(self, repo, alice, caplog):
        lost = repo.create_lost_item(lost_item(alice))
        repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=uuid.uuid4(), score=75))

        with caplog.at_level(logging.WARNING):
            assert repo.list_match_requests() == []

        assert "invalid found item reference" in caplog.text

    def test_stats(self, repo, alice, bob):
        lost = repo.create_lost_item(lost_item(alice))
        found = repo.create_found_item(found_item(bob))
        approved = repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=found.id, score=80))
        repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=found.id, score=80))
        repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=found.id, score=80))
        repo.update_match_request_status(approved.id, "approved")

        assert repo.get_stats() == {
            "total_lost": 1,
            "total_found": 1,
            "pending_matches": 2,
            "success_rate": 33,
        }

    def test_stats_empty(self, repo):
        assert repo.get_stats()["success_rate"] == 0


class TestNotifications:
    def test_newest_first(self, repo, alice):
        for offset, title in enumerate(["first", "second", "third"]):
            repo.create_notification(
                Notification(user_id=alice.id, title=title, body="...", created_at=DAY0 + timedelta(minutes=offset))
            )

        titles = [notif.title for notif in repo.list_user_notifications(alice.id)]
        assert titles == ["third", "second", "first"]
        assert [n.title for n in repo.list_user_notifications(alice.id, limit=1)] == ["third"]

    def test_mark_read_is_idempotent(self, repo, alice):
        notif = repo.create_notification(Notification(user_id=alice.id, title="t", body="b"))

        repo.mark_notification_read(notif.id, alice.id)
        repo.mark_notification_read(notif.id, alice.id)

        assert repo.list_user_notifications(alice.id)[0].is_read is True
        assert repo.count_unread_notifications(alice.id) == 0

    def test_mark_read_scoped_to_recipient(self, repo, alice, bob):
        notif = repo.create_notification(Notification(user_id=alice.id, title="t", body="b"))

        with pytest.raises(NotFoundError):
            repo.mark_notification_read(notif.id, bob.id)

        assert repo.count_unread_notifications(alice.id) == 1

    def test_unread_only_and_mark_all(self, repo, alice, bob):
        first = repo.create_notification(Notification(user_id=alice.id, title="a", body="b"))
        repo.create_notification(Notification(user_id=alice.id, title="c", body="d"))
        repo.create_notification(Notification(user_id=bob.id, title="e", body="f"))
        repo.mark_notification_read(first.id, alice.id)

        assert [n.title for n in repo.list_user_notifications(alice.id, unread_only=True)] == ["c"]
        assert repo.mark_all_notifications_read(alice.id) == 1
        assert repo.count_unread_notifications(alice.id) == 0
        assert repo.count_unread_notifications(bob.id) == 1


class TestReporterInfo:
    def test_item_carries_reporter(self, repo, alice):
        lost = repo.create_lost_item(lost_item(alice))

        data = repo.item_with_user(lost)
        assert data["title"] == "Blue umbrella"
        assert data["user"] == {"name": "Alice", "university_id": "U2025-001"}

    def test_unknown_reporter(self, repo, alice):
        found = repo.create_found_item(found_item(alice))
        found.user_id = uuid.uuid4()

        assert repo.item_with_user(found)["user"] == {"name": "Unknown", "university_id": "Unknown"}

    def test_enriched_match_carries_both_reporters(self, repo, alice, bob):
        lost = repo.create_lost_item(lost_item(alice))
        found = repo.create_found_item(found_item(bob))
        match = repo.create_match_request(MatchRequest(lost_id=lost.id, found_id=found.id, score=80))

        data = repo.get_match_request_with_items(match.id).to_dict()
        assert data["lost_item"]["user"]["name"] == "Alice"
        assert data["found_item"]["user"]["name"] == "Bob"


def test_memory_reads_tolerate_concurrent_writes():
    repo = InMemoryRepository()
    recipient = uuid.uuid4()
    for _ in range(20000):
        repo.create_notification(Notification(user_id=uuid.uuid4(), title="t", body="b"))

    stop = threading.Event()

    def writer():
        while True:
            repo.create_notification(Notification(user_id=recipient, title="t", body="b"))
            if stop.is_set():
                break

    errors = []
    thread = threading.Thread(target=writer)
    thread.start()
    try:
        for _ in range(200):
            try:
                repo.count_unread_notifications(recipient)
                repo.list_user_notifications(recipient, limit=5)
            except RuntimeError as e:
                errors.append(str(e))
    finally:
        stop.set()
        thread.join()

    assert errors == []
    assert repo.count_unread_notifications(recipient) > 0
