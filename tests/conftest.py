import pytest

from backend.roommate_engine.interfaces.memory_store import InMemoryProfileStore
from backend.roommate_engine.matchmaker_engine import MatchMakerEngine
from backend.roommate_engine.models.filter_settings import FilterSettings
from backend.roommate_engine.models.user_profile import UserProfile
from backend.roommate_engine.session import Session


def make_profile(user_id, **fields):
    return UserProfile({"id": user_id, **fields})


def make_filter(**fields):
    return FilterSettings(fields)


@pytest.fixture
def me():
    return make_profile(
        "me",
        first_name="Alex",
        date_of_birth="2002-03-14",
        gender="female",
        grade_level="Junior",
        college_name="Boston University",
        major="Biology",
        housing_status="Looking for Roommate",
        rent_min=900,
        rent_max=1200,
        cleanliness=4,
        sleep_schedule="Night Owl",
        smoker=False,
        pet_friendly=True,
        drinking="Socially",
        cannabis="Never",
        workout="Often",
        interests=["hiking", "coding", "cooking"],
        location={"latitude": 42.3505, "longitude": -71.1054},
    )


@pytest.fixture
def candidates():
    return [
        make_profile(
            "lease-seeker",
            date_of_birth="2001-09-02",
            gender="female",
            grade_level="junior",
            college_name="boston university",
            housing_status="Looking for Lease",
            budget_min=1000,
            budget_max=1300,
            cleanliness=4,
            sleep_schedule="night owl",
            smoker=False,
            pet_friendly=True,
            drinking="Socially",
            cannabis="Never",
            workout="Often",
            interests=["coding", "gaming"],
            location={"latitude": 42.3601, "longitude": -71.0589},
        ),
        make_profile(
            "other-roommate",
            gender="male",
            college_name="Northeastern University",
            housing_status="Looking for Roommate",
            cleanliness=1,
            sleep_schedule="Early Bird",
            smoker=True,
            interests=["football"],
        ),
        make_profile(
            "together",
            gender="female",
            college_name="Boston University",
            housing_status="Looking to Find Together",
            cleanliness=3,
        ),
    ]


@pytest.fixture
def store(me, candidates):
    return InMemoryProfileStore(profiles=[me, *candidates])


@pytest.fixture
def session():
    return Session("me")


@pytest.fixture
def engine(store, session):
    return MatchMakerEngine(store, session)
