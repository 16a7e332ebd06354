from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from backend.roommate_engine.models.filter_settings import FilterSettings
from backend.roommate_engine.models.swipe import Conversation, SwipeRecord
from backend.roommate_engine.models.user_profile import UserProfile


class ProfileStore(ABC):
    """
    Read/write access to profiles, filter settings, swipes and conversations.

    Implementations raise ``StoreError`` for any backend failure and never
    leak driver specific exceptions.
    """

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        ...

    @abstractmethod
    def get_all_profiles(self) -> List[UserProfile]:
        ...

    @abstractmethod
    def get_filter_settings(self, user_id: str) -> Optional[FilterSettings]:
        ...

    @abstractmethod
    def get_swipes(self, from_id: str, to_id: Optional[str] = None, liked: Optional[bool] = None) -> List[SwipeRecord]:
        """Swipes made by ``from_id``, optionally narrowed to one target and/or decision."""

    @abstractmethod
    def put_swipe(self, record: SwipeRecord) -> None:
        ...

    @abstractmethod
    def find_conversation(self, user_a: str, user_b: str) -> Optional[str]:
        ...

    @abstractmethod
    def create_conversation(self, participants: Iterable[str]) -> str:
        """
        Create the conversation for a set of participants and return its id.
        If one already exists for the same participants, return that id
        instead of creating a second one.
        """

    @abstractmethod
    def list_conversations(self, user_id: str) -> List[Conversation]:
        """Conversations that include ``user_id``, newest first."""

    @abstractmethod
    def set_blocked_users(self, user_id: str, blocked_ids: Iterable[str]) -> None:
        ...
