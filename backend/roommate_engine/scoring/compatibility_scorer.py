import logging
from typing import Dict, NamedTuple, Optional, Tuple

import numpy as np

from backend.roommate_engine.models.user_profile import HousingStatus, UserProfile
from backend.roommate_engine.scoring.dates import age_difference_years
from backend.roommate_engine.scoring.filter_scorer import housing_pairs

logger = logging.getLogger(__name__)

CATEGORY_SCALE = 10.0
NEUTRAL = CATEGORY_SCALE / 2
WEIGHT_TOTAL = 100.0

# cleanliness is rated 1-5, so 4 is the widest possible gap
CLEANLINESS_SPAN = 4.0
AGE_SPAN_YEARS = 5.0

# added on top of the weighted categories, overall still capped at 100
VERIFIED_BONUS = 10.0
LEASE_DURATION_BONUS = 5.0

DEFAULT_WEIGHTS = {
    "housing": 15.0,
    "budget": 15.0,
    "cleanliness": 15.0,
    "sleep": 10.0,
    "interests": 15.0,
    "lifestyle": 15.0,
    "age": 10.0,
    "academics": 5.0,
}


class CompatibilityBreakdown(NamedTuple):
    overall: float
    categories: Dict[str, float]


def _price_range(low: Optional[float], high: Optional[float]) -> Optional[Tuple[float, float]]:
    if low is None and high is None:
        return None
    low = high if low is None else low
    high = low if high is None else high
    return (min(low, high), max(low, high))


def _range_overlap(first, second) -> float:
    low, high = max(first[0], second[0]), min(first[1], second[1])
    if high < low:
        return 0.0
    narrowest = min(first[1] - first[0], second[1] - second[0])
    if narrowest == 0:
        return CATEGORY_SCALE
    return CATEGORY_SCALE * (high - low) / narrowest


def housing_score(a: UserProfile, b: UserProfile) -> float:
    if a.housing_status is None or b.housing_status is None:
        return NEUTRAL
    return CATEGORY_SCALE if housing_pairs(a.housing_status, b.housing_status) else 0.0


def budget_score(a: UserProfile, b: UserProfile) -> float:
    """
    Someone looking for a roommate already holds a lease, so their rent is
    compared against the other side's budget. Otherwise budgets are compared.
    """
    if a.housing_status is HousingStatus.LOOKING_FOR_ROOMMATE:
        first, second = _price_range(a.rent_min, a.rent_max), _price_range(b.budget_min, b.budget_max)
    elif b.housing_status is HousingStatus.LOOKING_FOR_ROOMMATE:
        first, second = _price_range(a.budget_min, a.budget_max), _price_range(b.rent_min, b.rent_max)
    else:
        first, second = _price_range(a.budget_min, a.budget_max), _price_range(b.budget_min, b.budget_max)

    if first is None or second is None:
        return NEUTRAL
    return _range_overlap(first, second)


def cleanliness_score(a: UserProfile, b: UserProfile) -> float:
    if a.cleanliness is None or b.cleanliness is None:
        return NEUTRAL
    gap = abs(a.cleanliness - b.cleanliness)
    return max(0.0, CATEGORY_SCALE * (1 - gap / CLEANLINESS_SPAN))


def sleep_score(a: UserProfile, b: UserProfile) -> float:
    if a.sleep_schedule is None or b.sleep_schedule is None:
        return NEUTRAL
    return CATEGORY_SCALE if a.sleep_schedule.lower() == b.sleep_schedule.lower() else 0.0


def interests_score(a: UserProfile, b: UserProfile) -> float:
    mine = {interest.lower() for interest in a.interests}
    theirs = {interest.lower() for interest in b.interests}
    if not mine or not theirs:
        return NEUTRAL
    return CATEGORY_SCALE * len(mine & theirs) / min(len(mine), len(theirs))


def _agreement(pairs) -> Optional[float]:
    comparable = [(x, y) for x, y in pairs if x is not None and y is not None]
    if not comparable:
        return None
    agreed = sum(1 for x, y in comparable if x == y)
    return CATEGORY_SCALE * agreed / len(comparable)


def _lower(value):
    return value.lower() if value is not None else None


def lifestyle_score(a: UserProfile, b: UserProfile) -> float:
    score = _agreement([
        (a.smoker, b.smoker),
        (a.pet_friendly, b.pet_friendly),
        (_lower(a.drinking), _lower(b.drinking)),
        (_lower(a.cannabis), _lower(b.cannabis)),
        (_lower(a.workout), _lower(b.workout)),
    ])
    return NEUTRAL if score is None else score


def age_score(a: UserProfile, b: UserProfile) -> float:
    years = age_difference_years(a.date_of_birth, b.date_of_birth)
    if years is None:
        return NEUTRAL
    return max(0.0, CATEGORY_SCALE * (1 - years / AGE_SPAN_YEARS))


def academics_score(a: UserProfile, b: UserProfile) -> float:
    score = _agreement([
        (_lower(a.college_name), _lower(b.college_name)),
        (_lower(a.grade_level), _lower(b.grade_level)),
        (_lower(a.major), _lower(b.major)),
        (_lower(a.dorm_type), _lower(b.dorm_type)),
    ])
    return NEUTRAL if score is None else score


def trust_bonus(a: UserProfile, b: UserProfile) -> float:
    """Points for both users being verified and for agreeing on lease duration."""
    bonus = 0.0
    if a.is_verified and b.is_verified:
        bonus += VERIFIED_BONUS
    if a.lease_duration and b.lease_duration and a.lease_duration.lower() == b.lease_duration.lower():
        bonus += LEASE_DURATION_BONUS
    return bonus


CATEGORY_SCORERS = {
    "housing": housing_score,
    "budget": budget_score,
    "cleanliness": cleanliness_score,
    "sleep": sleep_score,
    "interests": interests_score,
    "lifestyle": lifestyle_score,
    "age": age_score,
    "academics": academics_score,
}


class CompatibilityScorer:
    def __init__(self, weights: Optional[dict] = None):
        weights = dict(DEFAULT_WEIGHTS if weights is None else weights)

        unknown = set(weights) - set(CATEGORY_SCORERS)
        if unknown:
            raise ValueError(f"Unknown compatibility categories: {sorted(unknown)}")
        total = sum(weights.values())
        if abs(total - WEIGHT_TOTAL) > 1e-6:
            raise ValueError(f"Compatibility weights must sum to {WEIGHT_TOTAL:g}, got {total:g}")

        self.categories = [name for name in CATEGORY_SCORERS if name in weights]
        self.weights = np.array([weights[name] for name in self.categories], dtype=float)

    def category_scores(self, a: UserProfile, b: UserProfile) -> Dict[str, float]:
        """Per-category points on the 0-10 scale."""
        return {name: float(CATEGORY_SCORERS[name](a, b)) for name in self.categories}

    def breakdown(self, a: UserProfile, b: UserProfile) -> CompatibilityBreakdown:
        categories = self.category_scores(a, b)
        points = np.array([categories[name] for name in self.categories], dtype=float)
        weighted = float(np.dot(self.weights, points) / CATEGORY_SCALE)
        overall = min(WEIGHT_TOTAL, weighted + trust_bonus(a, b))
        return CompatibilityBreakdown(overall=overall, categories=categories)

    def smart_score(self, a: UserProfile, b: UserProfile) -> float:
        """Weighted compatibility of ``b`` from ``a``'s point of view, 0-100."""
        score = self.breakdown(a, b).overall
        logger.debug("smart score %s -> %s: %.2f", a.id, b.id, score)
        return score
