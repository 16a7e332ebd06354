from enum import Enum
from typing import Optional

from backend.roommate_engine.models.coerce import as_bool, as_float, as_int, as_set, as_str
from backend.roommate_engine.models.user_profile import HousingStatus


class FilterMode(Enum):
    BY_COLLEGE = "college"
    BY_DISTANCE = "distance"

    @classmethod
    def parse(cls, value) -> Optional["FilterMode"]:
        if value is None or isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "").replace(" ", "")
        for mode in cls:
            if key in (mode.value, mode.name.lower().replace("_", "")):
                return mode
        return None


class FilterSettings:
    """
    Saved search preferences of one user. Read-only to the engine.
    A None value on any field means "no preference".
    """

    def __init__(self, data: dict):
        self.user_id = data.get("user_id")
        self.mode = FilterMode.parse(data.get("mode"))
        self.housing_status = HousingStatus.parse(data.get("housing_status"))
        self.college_name = as_str(data.get("college_name"))
        self.grade_group = as_str(data.get("grade_group"))
        self.max_distance = as_float(data.get("max_distance"))
        self.room_type = as_str(data.get("room_type"))
        self.amenities = as_set(data.get("amenities"))
        self.cleanliness = as_int(data.get("cleanliness"))
        self.sleep_schedule = as_str(data.get("sleep_schedule"))
        self.preferred_gender = as_str(data.get("preferred_gender"))
        self.max_age_difference = as_float(data.get("max_age_difference"))
        self.pet_friendly = as_bool(data.get("pet_friendly"))
        self.smoker = as_bool(data.get("smoker"))
        self.drinker = as_bool(data.get("drinker"))
        self.marijuana = as_bool(data.get("marijuana"))
        self.workout = as_bool(data.get("workout"))
        # comma separated free text, e.g. "hiking, coding"
        self.interests = as_str(data.get("interests"))

    @classmethod
    def empty(cls, user_id=None) -> "FilterSettings":
        return cls({"user_id": user_id})

    def desired_interests(self) -> set:
        if not self.interests:
            return set()
        return {part.strip().lower() for part in self.interests.split(",") if part.strip()}

    def __repr__(self):
        return f"FilterSettings(user_id={self.user_id!r}, mode={self.mode})"
