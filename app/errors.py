class LostFoundError(Exception):
    """Base class for errors raised by the matching and notification core."""


class ValidationError(LostFoundError):
    """Malformed or missing item/match fields."""

    def __init__(self, message: str, details=None):
        self.details = details
        super().__init__(message)


class InvalidTransitionError(ValidationError):
    def __init__(self, entity: str, current: str, target: str):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Illegal {entity} transition: {current} -> {target}")


class NotFoundError(LostFoundError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ReferentialIntegrityError(LostFoundError):
    """A match request points at a lost or found item that no longer exists."""

    def __init__(self, match_id, missing: str):
        self.match_id = match_id
        self.missing = missing
        super().__init__(f"Match request {match_id} has invalid {missing} reference")


class NotificationDispatchError(LostFoundError):
    pass


class RepositoryError(LostFoundError):
    """Underlying storage failure."""


class PermissionDeniedError(LostFoundError):
    """Caller is not allowed to act on this record."""
