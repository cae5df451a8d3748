import uuid

import pytest

from app.errors import InvalidTransitionError, NotFoundError, ReferentialIntegrityError, ValidationError
from app.models.match_request import MatchRequest


@pytest.fixture
def proposal(repository, make_lost_item, make_found_item, finder):
    lost_item = make_lost_item()
    found_item = make_found_item()
    return repository.create_match_request(MatchRequest(lost_id=lost_item.id, found_id=found_item.id, score=96))


def item_statuses(repository, match):
    return (
        repository.get_lost_item(match.lost_id).status,
        repository.get_found_item(match.found_id).status,
    )


def test_approve_marks_match_and_both_items(repository, review_service, proposal):
    match = review_service.approve(proposal.id)

    assert match.status == "approved"
    assert item_statuses(repository, proposal) == ("matched", "matched")


def test_approve_notifies_both_owners(repository, review_service, proposal, owner, finder, admin):
    review_service.approve(proposal.id)

    assert [n.title for n in repository.list_user_notifications(owner.id)] == ["Match Approved!"]
    assert [n.title for n in repository.list_user_notifications(finder.id)] == ["Match Approved!"]
    assert repository.list_user_notifications(admin.id) == []


def test_reject_leaves_items_pending(repository, review_service, proposal):
    match = review_service.reject(proposal.id)

    assert match.status == "rejected"
    assert item_statuses(repository, proposal) == ("pending", "pending")
    assert repository.notifications == {}


def test_rejected_items_stay_eligible(repository, engine, review_service, proposal):
    review_service.reject(proposal.id)

    created = engine.match_lost_item(repository.get_lost_item(proposal.lost_id))

    assert len(created) == 1


def test_double_approval_resends_notifications(repository, review_service, proposal, owner, finder):
    review_service.approve(proposal.id)
    match = review_service.approve(proposal.id)

    assert match.status == "approved"
    assert item_statuses(repository, proposal) == ("matched", "matched")
    assert len(repository.list_user_notifications(owner.id)) == 2
    assert len(repository.list_user_notifications(finder.id)) == 2


def test_cannot_reject_approved_match(review_service, proposal):
    review_service.approve(proposal.id)

    with pytest.raises(InvalidTransitionError):
        review_service.reject(proposal.id)


def test_cannot_approve_rejected_match(repository, review_service, proposal):
    review_service.reject(proposal.id)

    with pytest.raises(InvalidTransitionError):
        review_service.approve(proposal.id)

    assert item_statuses(repository, proposal) == ("pending", "pending")


def test_approve_fails_before_writing_when_item_is_closed(repository, review_service, proposal):
    repository.update_found_item_status(proposal.found_id, "closed")

    with pytest.raises(InvalidTransitionError):
        review_service.approve(proposal.id)

    assert repository.get_match_request(proposal.id).status == "pending"
    assert repository.get_lost_item(proposal.lost_id).status == "pending"


def test_unknown_match(review_service):
    with pytest.raises(NotFoundError):
        review_service.approve(uuid.uuid4())
    with pytest.raises(NotFoundError):
        review_service.reject(uuid.uuid4())


def test_match_with_missing_item(repository, review_service, make_lost_item):
    lost_item = make_lost_item()
    match = repository.create_match_request(MatchRequest(lost_id=lost_item.id, found_id=uuid.uuid4(), score=70))

    with pytest.raises(ReferentialIntegrityError):
        review_service.approve(match.id)


def test_verify_dispatches_on_status(repository, review_service, proposal):
    assert review_service.verify(proposal.id, "rejected").status == "rejected"

    with pytest.raises(ValidationError):
        review_service.verify(proposal.id, "maybe")
