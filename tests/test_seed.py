from app.db.seed import seed_repository
from app.repository.memory import InMemoryRepository


def test_seed_populates_empty_store_once():
    repository = InMemoryRepository()

    assert seed_repository(repository) is True
    assert seed_repository(repository) is False

    assert len(repository.list_users()) == 4
    assert len(repository.list_admins()) == 1
    assert len(repository.list_lost_items()) == 3
    assert len(repository.list_found_items()) == 3


def test_seed_proposes_the_iphone_pair():
    repository = InMemoryRepository()
    seed_repository(repository)

    matches = repository.list_pending_match_requests()

    assert len(matches) == 1
    assert matches[0].lost_item.title == "iPhone 13 Pro"
    assert matches[0].found_item.title == "Black iPhone"
    assert matches[0].lost_item.user_id != matches[0].found_item.user_id
    assert len(repository.notifications) == 3
