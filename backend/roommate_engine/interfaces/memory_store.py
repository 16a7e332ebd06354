import itertools
import threading
from datetime import datetime, timezone

from backend.roommate_engine.errors import StoreError
from backend.roommate_engine.interfaces.profile_store import ProfileStore
from backend.roommate_engine.models.filter_settings import FilterSettings
from backend.roommate_engine.models.swipe import Conversation, pair_key
from backend.roommate_engine.models.user_profile import UserProfile


class InMemoryProfileStore(ProfileStore):
    """
    Process-local store used for fixtures and local runs.
    A single lock makes find-or-create of conversations atomic.
    """

    def __init__(self, profiles=(), filter_settings=()):
        self._lock = threading.Lock()
        self._profiles = {}
        self._filters = {}
        self._swipes = []
        self._conversations = {}
        self._ids = itertools.count(1)

        for profile in profiles:
            self.add_profile(profile)
        for settings in filter_settings:
            self.save_filter_settings(settings)

    def add_profile(self, profile):
        if isinstance(profile, dict):
            profile = UserProfile(profile)
        if not profile.id:
            raise StoreError("Profiles need an id")
        with self._lock:
            self._profiles[profile.id] = profile
        return profile

    def save_filter_settings(self, settings):
        if isinstance(settings, dict):
            settings = FilterSettings(settings)
        with self._lock:
            self._filters[settings.user_id] = settings
        return settings

    def get_profile(self, user_id):
        with self._lock:
            return self._profiles.get(user_id)

    def get_all_profiles(self):
        with self._lock:
            return list(self._profiles.values())

    def get_filter_settings(self, user_id):
        with self._lock:
            return self._filters.get(user_id)

    def get_swipes(self, from_id, to_id=None, liked=None):
        with self._lock:
            return [
                record for record in self._swipes
                if record.from_id == from_id
                and (to_id is None or record.to_id == to_id)
                and (liked is None or record.liked == liked)
            ]

    def put_swipe(self, record):
        with self._lock:
            self._swipes.append(record)

    def find_conversation(self, user_a, user_b):
        with self._lock:
            for conversation in self._conversations.values():
                if conversation.includes(user_a) and conversation.includes(user_b):
                    return conversation.id
        return None

    def create_conversation(self, participants):
        participants = tuple(participants)
        key = pair_key(*participants)
        with self._lock:
            existing = self._conversations.get(key)
            if existing is not None:
                return existing.id
            conversation = Conversation(
                id=f"conversation-{next(self._ids)}",
                participants=participants,
                created_at=datetime.now(timezone.utc),
            )
            self._conversations[key] = conversation
            return conversation.id

    def list_conversations(self, user_id):
        with self._lock:
            found = [c for c in self._conversations.values() if c.includes(user_id)]
        # ids grow monotonically, so they break created_at ties
        return sorted(found, key=lambda c: (c.created_at, int(c.id.rsplit("-", 1)[1])), reverse=True)

    def set_blocked_users(self, user_id, blocked_ids):
        with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                raise StoreError(f"No profile stored for {user_id}")
            profile.blocked_user_ids = set(blocked_ids)
