"""Legal status changes for items and match requests.

Items: pending -> matched -> returned -> closed, and any non-closed item may
be closed directly. `matched` is only reachable through match approval.

Match requests: pending -> approved | rejected. Repeating the same decision
is tolerated: the status is rewritten and approval notifications re-sent.
"""

from typing import Optional

from app.errors import InvalidTransitionError, ValidationError
from app.models.enums import ItemStatus, MatchStatus

ITEM_TRANSITIONS = {
    ItemStatus.PENDING: {ItemStatus.MATCHED, ItemStatus.CLOSED},
    ItemStatus.MATCHED: {ItemStatus.RETURNED, ItemStatus.CLOSED},
    ItemStatus.RETURNED: {ItemStatus.CLOSED},
    ItemStatus.CLOSED: set(),
}

MATCH_TRANSITIONS = {
    MatchStatus.PENDING: {MatchStatus.APPROVED, MatchStatus.REJECTED},
    MatchStatus.APPROVED: {MatchStatus.APPROVED},
    MatchStatus.REJECTED: {MatchStatus.REJECTED},
}

# statuses an owner may request directly, matched is set by approval only
OWNER_ITEM_TARGETS = {ItemStatus.RETURNED, ItemStatus.CLOSED}


def parse_item_status(value: str) -> ItemStatus:
    try:
        return ItemStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown item status '{value}'")


def parse_match_status(value: str) -> MatchStatus:
    try:
        return MatchStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown match status '{value}'")


def can_transition_item(current: Optional[ItemStatus], target: ItemStatus) -> bool:
    if current is None:
        return target == ItemStatus.PENDING
    return target in ITEM_TRANSITIONS[current]


def can_transition_match(current: Optional[MatchStatus], target: MatchStatus) -> bool:
    if current is None:
        return target == MatchStatus.PENDING
    return target in MATCH_TRANSITIONS[current]


def ensure_item_transition(current: str, target: str) -> ItemStatus:
    current_status = parse_item_status(current)
    target_status = parse_item_status(target)

    if not can_transition_item(current_status, target_status):
        raise InvalidTransitionError("item", current_status.value, target_status.value)
    return target_status


def ensure_match_transition(current: str, target: str) -> MatchStatus:
    current_status = parse_match_status(current)
    target_status = parse_match_status(target)

    if not can_transition_match(current_status, target_status):
        raise InvalidTransitionError("match request", current_status.value, target_status.value)
    return target_status
