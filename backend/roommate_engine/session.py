import threading
from typing import List, Optional

from backend.roommate_engine.models.user_profile import UserProfile


class Session:
    """
    State owned by one signed-in user for the lifetime of their session:
    the acting user id, the pairs already matched during this session and
    the generation counter that lets newer feed requests win.
    """

    def __init__(self, user_id: str):
        if not user_id:
            raise ValueError("A session needs the acting user's id")
        self.user_id = user_id
        self._lock = threading.Lock()
        self._matched_pairs = set()
        self._feed_generation = 0
        self._latest_feed: Optional[List[UserProfile]] = None

    def has_matched(self, key: str) -> bool:
        with self._lock:
            return key in self._matched_pairs

    def remember_match(self, key: str) -> None:
        with self._lock:
            self._matched_pairs.add(key)

    def begin_feed_request(self) -> int:
        with self._lock:
            self._feed_generation += 1
            return self._feed_generation

    def publish_feed(self, token: int, feed: List[UserProfile]) -> bool:
        """Store ``feed`` unless a newer request was started after ``token``."""
        with self._lock:
            if token != self._feed_generation:
                return False
            self._latest_feed = list(feed)
            return True

    @property
    def latest_feed(self) -> Optional[List[UserProfile]]:
        with self._lock:
            return None if self._latest_feed is None else list(self._latest_feed)
