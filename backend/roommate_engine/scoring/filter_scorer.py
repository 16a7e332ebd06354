import logging
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional

from backend.roommate_engine.models.filter_settings import FilterMode, FilterSettings
from backend.roommate_engine.models.user_profile import HousingStatus, UserProfile
from backend.roommate_engine.scoring.dates import age_difference_years
from backend.roommate_engine.scoring.geo import distance_between

logger = logging.getLogger(__name__)


class Criterion(Enum):
    HOUSING_PAIRING = "HousingPairing"
    COLLEGE_MATCH = "CollegeMatch"
    DISTANCE = "Distance"
    GRADE = "Grade"
    ROOM_TYPE = "RoomType"
    AMENITIES = "Amenities"
    CLEANLINESS = "Cleanliness"
    SLEEP = "Sleep"
    GENDER = "Gender"
    AGE_DIFF = "AgeDiff"
    PET_FRIENDLY = "PetFriendly"
    SMOKER = "Smoker"
    DRINKER = "Drinker"
    MARIJUANA = "Marijuana"
    WORKOUT = "Workout"
    INTERESTS = "Interests"


# which candidate housing statuses each of my desired statuses pairs with
HOUSING_PAIRINGS = {
    HousingStatus.LOOKING_FOR_ROOMMATE: {HousingStatus.LOOKING_FOR_LEASE},
    HousingStatus.LOOKING_FOR_LEASE: {HousingStatus.LOOKING_FOR_ROOMMATE},
    HousingStatus.LOOKING_TO_FIND_TOGETHER: {
        HousingStatus.LOOKING_TO_FIND_TOGETHER,
        HousingStatus.LOOKING_FOR_LEASE,
    },
}

# categorical answers meaning "does not do this at all"
DRINKING_NONE = "not for me"
CANNABIS_NONE = "never"
WORKOUT_NONE = "never"


class FilterResult(NamedTuple):
    score: int
    breakdown: Dict[Criterion, bool]

    def failed(self):
        return [criterion for criterion, passed in self.breakdown.items() if not passed]


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _equal_or_missing(desired, actual) -> bool:
    if desired is None or actual is None:
        return True
    return desired == actual


def _ternary(want: Optional[bool], value: Optional[str], none_sentinel: str) -> bool:
    if want is None or value is None:
        return True
    does_it = value.lower() != none_sentinel
    return does_it if want else not does_it


def housing_pairs(desired: Optional[HousingStatus], candidate: Optional[HousingStatus]) -> bool:
    """Directional pairing check; unknown or missing statuses never pair."""
    if desired is None or candidate is None:
        return False
    return candidate in HOUSING_PAIRINGS.get(desired, set())


def _housing_pairing(fs: FilterSettings, me: UserProfile, other: UserProfile) -> bool:
    return housing_pairs(fs.housing_status, other.housing_status)


def _college_match(fs, me, other) -> bool:
    return _lower(fs.college_name) == _lower(other.college_name)


def _distance(fs, me, other) -> bool:
    if fs.mode is not FilterMode.BY_DISTANCE:
        return True
    if fs.max_distance is None or me.location is None or other.location is None:
        return True
    return distance_between(me.location, other.location) <= fs.max_distance


def _grade(fs, me, other) -> bool:
    return _equal_or_missing(_lower(fs.grade_group), _lower(other.grade_level))


def _room_type(fs, me, other) -> bool:
    return _equal_or_missing(fs.room_type, other.room_type)


def _amenities(fs, me, other) -> bool:
    if not fs.amenities or not other.amenities:
        return True
    return fs.amenities <= other.amenities


def _cleanliness(fs, me, other) -> bool:
    return _equal_or_missing(fs.cleanliness, other.cleanliness)


def _sleep(fs, me, other) -> bool:
    return _equal_or_missing(_lower(fs.sleep_schedule), _lower(other.sleep_schedule))


def _gender(fs, me, other) -> bool:
    return _equal_or_missing(fs.preferred_gender, other.gender)


def _age_diff(fs, me, other) -> bool:
    if fs.max_age_difference is None:
        return True
    years = age_difference_years(me.date_of_birth, other.date_of_birth)
    if years is None:
        return True
    return years <= fs.max_age_difference


def _pet_friendly(fs, me, other) -> bool:
    return _equal_or_missing(fs.pet_friendly, other.pet_friendly)


def _smoker(fs, me, other) -> bool:
    return _equal_or_missing(fs.smoker, other.smoker)


def _drinker(fs, me, other) -> bool:
    return _ternary(fs.drinker, other.drinking, DRINKING_NONE)


def _marijuana(fs, me, other) -> bool:
    return _ternary(fs.marijuana, other.cannabis, CANNABIS_NONE)


def _workout(fs, me, other) -> bool:
    return _ternary(fs.workout, other.workout, WORKOUT_NONE)


def _interests(fs, me, other) -> bool:
    wanted = fs.desired_interests()
    have = {interest.lower() for interest in other.interests}
    if not wanted or not have:
        return True
    return not wanted.isdisjoint(have)


Evaluator = Callable[[FilterSettings, UserProfile, UserProfile], bool]

EVALUATORS: Dict[Criterion, Evaluator] = {
    Criterion.HOUSING_PAIRING: _housing_pairing,
    Criterion.COLLEGE_MATCH: _college_match,
    Criterion.DISTANCE: _distance,
    Criterion.GRADE: _grade,
    Criterion.ROOM_TYPE: _room_type,
    Criterion.AMENITIES: _amenities,
    Criterion.CLEANLINESS: _cleanliness,
    Criterion.SLEEP: _sleep,
    Criterion.GENDER: _gender,
    Criterion.AGE_DIFF: _age_diff,
    Criterion.PET_FRIENDLY: _pet_friendly,
    Criterion.SMOKER: _smoker,
    Criterion.DRINKER: _drinker,
    Criterion.MARIJUANA: _marijuana,
    Criterion.WORKOUT: _workout,
    Criterion.INTERESTS: _interests,
}

_missing = set(Criterion) - set(EVALUATORS)
if _missing:
    raise RuntimeError(f"Criteria without an evaluator: {sorted(c.value for c in _missing)}")

MAX_FILTER_SCORE = len(Criterion)


class FilterScorer:
    """
    Scores a candidate against the acting user's saved filter settings.
    Each satisfied criterion is worth one point.
    """

    def score(self, filter_settings: FilterSettings, me: UserProfile, candidate: UserProfile) -> FilterResult:
        breakdown = {
            criterion: bool(EVALUATORS[criterion](filter_settings, me, candidate))
            for criterion in Criterion
        }
        result = FilterResult(score=sum(breakdown.values()), breakdown=breakdown)
        logger.debug("filter score %s -> %s: %d", me.id, candidate.id, result.score)
        return result
