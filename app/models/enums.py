from enum import Enum


class ItemStatus(str, Enum):
    PENDING = "pending"
    MATCHED = "matched"
    RETURNED = "returned"
    CLOSED = "closed"


class MatchStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"
