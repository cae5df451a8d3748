"""Match scoring between one lost item and one found item.

Scoring algorithm:
- Category match: 40 points (case-insensitive exact match)
- Location match: 20 points (case-insensitive exact match)
- Date proximity: up to 15 points (closer dates = higher score)
- Keyword overlap: up to 20 points (Jaccard similarity of title + description)
- Images present: 5 points bonus

Pairs scoring at or above MATCH_THRESHOLD become match requests.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from app.matching.keywords import extract_keywords
from app.models.found_item import FoundItem
from app.models.lost_item import LostItem

MATCH_THRESHOLD = 60

CATEGORY_WEIGHT = 40
LOCATION_WEIGHT = 20
DATE_PROXIMITY_WEIGHT = 15
KEYWORD_OVERLAP_WEIGHT = 20
IMAGES_PRESENT_WEIGHT = 5

# (max day gap, share of DATE_PROXIMITY_WEIGHT)
DATE_TIERS = (
    (1, 0.9),
    (3, 0.7),
    (7, 0.5),
    (30, 0.2),
)

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class ScoreBreakdown:
    category: int = 0
    location: int = 0
    date: int = 0
    keywords: int = 0
    images: int = 0

    @property
    def total(self) -> int:
        return self.category + self.location + self.date + self.keywords + self.images

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MatchScore:
    lost_item: LostItem
    found_item: FoundItem
    breakdown: ScoreBreakdown

    @property
    def score(self) -> int:
        return self.breakdown.total

    @property
    def qualifies(self) -> bool:
        return self.score >= MATCH_THRESHOLD


def round_half_up(value: float) -> int:
    # built-in round() is banker's rounding: round(10.5) == 10, tiers need 11
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_between(first: datetime, second: datetime) -> float:
    delta = _as_utc(first) - _as_utc(second)
    return abs(delta.total_seconds()) / SECONDS_PER_DAY


def date_proximity_score(lost_date: datetime, found_date: datetime) -> int:
    days_diff = days_between(lost_date, found_date)

    if days_diff == 0:
        return DATE_PROXIMITY_WEIGHT

    for max_days, share in DATE_TIERS:
        if days_diff <= max_days:
            return round_half_up(DATE_PROXIMITY_WEIGHT * share)

    return 0


def keyword_overlap_score(lost_text: str, found_text: str) -> int:
    lost_words = extract_keywords(lost_text)
    found_words = extract_keywords(found_text)

    if not lost_words or not found_words:
        return 0

    jaccard = len(lost_words & found_words) / len(lost_words | found_words)
    return round_half_up(jaccard * KEYWORD_OVERLAP_WEIGHT)


def _same_text(first: str, second: str) -> bool:
    return (first or "").lower() == (second or "").lower()


def calculate_match_score(lost_item: LostItem, found_item: FoundItem) -> MatchScore:
    """Score a lost/found pair from 0 to 100.

    The total is always the sum of the breakdown, there is no separate
    rounding step on the total.
    """
    breakdown = ScoreBreakdown(
        category=CATEGORY_WEIGHT if _same_text(lost_item.category, found_item.category) else 0,
        location=LOCATION_WEIGHT if _same_text(lost_item.location, found_item.location) else 0,
        date=date_proximity_score(lost_item.date_lost, found_item.date_found),
        keywords=keyword_overlap_score(
            f"{lost_item.title} {lost_item.description}",
            f"{found_item.title} {found_item.description}",
        ),
        images=IMAGES_PRESENT_WEIGHT if lost_item.image_path and found_item.image_path else 0,
    )

    return MatchScore(lost_item=lost_item, found_item=found_item, breakdown=breakdown)
