"""Stand-in for the university identity service.

Only answers yes/no for a university id and checks whether an email belongs
to a university domain. Swap `verify_student_with_university_api` for a real
client when one is available.
"""

import logging
import os

logger = logging.getLogger(__name__)

MOCK_VALID_IDS = frozenset({
    "U2025-001", "U2025-002", "U2025-003", "U2025-004", "U2025-005",
    "ADMIN-001", "ADMIN-002",
})

DEFAULT_UNIVERSITY_DOMAINS = "university.test,student.university.test,staff.university.test"


def university_domains() -> set[str]:
    raw = os.getenv("UNIVERSITY_EMAIL_DOMAINS", DEFAULT_UNIVERSITY_DOMAINS)
    return {domain.strip().lower() for domain in raw.split(",") if domain.strip()}


def verify_student_with_university_api(university_id: str) -> bool:
    is_valid = university_id in MOCK_VALID_IDS
    logger.info("Verification result for %s: %s", university_id, is_valid)
    return is_valid


def is_university_email(email: str) -> bool:
    _, _, domain = email.rpartition("@")
    return bool(domain) and domain.lower() in university_domains()
