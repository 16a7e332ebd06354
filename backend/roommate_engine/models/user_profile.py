from enum import Enum
from typing import NamedTuple, Optional

from backend.roommate_engine.models.coerce import as_bool, as_float, as_int, as_set, as_str


class HousingStatus(Enum):
    LOOKING_FOR_ROOMMATE = "Looking for Roommate"
    LOOKING_FOR_LEASE = "Looking for Lease"
    LOOKING_TO_FIND_TOGETHER = "Looking to Find Together"

    @classmethod
    def parse(cls, value) -> Optional["HousingStatus"]:
        """
        Accept an enum member, its value or its name in any case.
        Unknown strings resolve to None instead of raising.
        """
        if value is None or isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for status in cls:
            if key in (status.value.lower(), status.name.lower()):
                return status
        compact = key.replace(" ", "").replace("_", "")
        for status in cls:
            if compact == status.name.lower().replace("_", ""):
                return status
        return None


class Location(NamedTuple):
    latitude: float
    longitude: float


def _parse_location(data: dict) -> Optional[Location]:
    raw = data.get("location")
    if isinstance(raw, dict):
        lat, lon = raw.get("latitude", raw.get("lat")), raw.get("longitude", raw.get("lon"))
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        lat, lon = raw
    else:
        lat, lon = data.get("latitude"), data.get("longitude")

    lat, lon = as_float(lat), as_float(lon)
    if lat is None or lon is None:
        return None
    return Location(lat, lon)


class UserProfile:
    """
    A roommate/lease seeker as read from the profile store.

    Every attribute apart from ``id`` is optional. Values that cannot be
    coerced (a non-numeric cleanliness, an unknown housing status) are kept
    as None so scoring treats them as missing.
    """

    def __init__(self, data: dict):
        self.id = data.get("id")

        # demographics
        self.first_name = as_str(data.get("first_name"))
        self.last_name = as_str(data.get("last_name"))
        self.date_of_birth = as_str(data.get("date_of_birth"))
        self.gender = as_str(data.get("gender"))
        self.grade_level = as_str(data.get("grade_level"))
        self.college_name = as_str(data.get("college_name"))
        self.major = as_str(data.get("major"))
        self.is_verified = bool(as_bool(data.get("is_verified")))

        # housing and lease
        self.housing_status = HousingStatus.parse(data.get("housing_status"))
        self.dorm_type = as_str(data.get("dorm_type"))
        self.room_type = as_str(data.get("room_type"))
        self.budget_min = as_float(data.get("budget_min"))
        self.budget_max = as_float(data.get("budget_max"))
        self.rent_min = as_float(data.get("rent_min"))
        self.rent_max = as_float(data.get("rent_max"))
        self.amenities = as_set(data.get("amenities"))
        self.special_lease_conditions = as_set(data.get("special_lease_conditions"))
        self.lease_start_date = as_str(data.get("lease_start_date"))
        self.lease_duration = as_str(data.get("lease_duration"))

        # lifestyle
        self.cleanliness = as_int(data.get("cleanliness"))
        self.sleep_schedule = as_str(data.get("sleep_schedule"))
        self.smoker = as_bool(data.get("smoker"))
        self.pet_friendly = as_bool(data.get("pet_friendly"))
        self.drinking = as_str(data.get("drinking"))
        self.cannabis = as_str(data.get("cannabis"))
        self.workout = as_str(data.get("workout"))
        self.dietary_preferences = as_set(data.get("dietary_preferences"))

        self.interests = as_set(data.get("interests"))
        self.location = _parse_location(data)
        self.blocked_user_ids = as_set(data.get("blocked_user_ids"))

    def __eq__(self, other):
        if not isinstance(other, UserProfile):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"UserProfile(id={self.id!r})"
