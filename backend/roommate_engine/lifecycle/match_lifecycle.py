# Handles swipe recording, mutual match detection and conversation creation.

import logging
from typing import List

from backend.roommate_engine.errors import StoreError, SwipeWriteError
from backend.roommate_engine.models.swipe import Conversation, SwipeAnalytics, SwipeRecord, pair_key
from backend.roommate_engine.session import Session

logger = logging.getLogger(__name__)


class MatchLifecycleManager:

    def __init__(self, db, session: Session):
        self.db = db
        self.session = session

    def record_swipe(self, from_id: str, to_id: str, liked: bool, super_liked: bool = False) -> bool:
        """
        Persist one swipe and, for likes, check whether the other side liked
        back. Returns True when the pair is mutually liked.

        Raises SwipeWriteError if the swipe could not be stored; the match
        check is skipped in that case.
        """
        if from_id == to_id:
            raise ValueError("Users cannot swipe on themselves")
        record = SwipeRecord(from_id=from_id, to_id=to_id, liked=liked, super_liked=super_liked)
        try:
            self.db.put_swipe(record)
        except StoreError as exc:
            raise SwipeWriteError(f"Could not record swipe {from_id} -> {to_id}: {exc}") from exc

        if not record.liked:
            return False
        return self.check_mutual_match(from_id, to_id)

    def check_mutual_match(self, from_id: str, to_id: str) -> bool:
        """
        True when ``to_id`` has liked ``from_id``. A mutual like still counts
        when its conversation could not be created; the pair is then not
        cached in the session, so the next like retries the creation.
        """
        key = pair_key(from_id, to_id)
        if self.session.has_matched(key):
            return True

        try:
            liked_back = self.db.get_swipes(to_id, to_id=from_id, liked=True)
        except StoreError as exc:
            logger.warning("Could not check reverse swipe %s -> %s: %s", to_id, from_id, exc)
            return False
        if not liked_back:
            return False

        if self.ensure_conversation(from_id, to_id) is None:
            logger.warning("%s and %s matched without a conversation, it will be retried on the next like", from_id, to_id)
        return True

    def ensure_conversation(self, user_a: str, user_b: str):
        """Create the pair's conversation unless one already exists."""
        key = pair_key(user_a, user_b)
        try:
            conversation_id = self.db.find_conversation(user_a, user_b)
            if conversation_id is None:
                conversation_id = self.db.create_conversation([user_a, user_b])
                logger.info("New match between %s and %s, conversation %s", user_a, user_b, conversation_id)
        except StoreError as exc:
            logger.error("Match between %s and %s has no conversation yet: %s", user_a, user_b, exc)
            return None
        self.session.remember_match(key)
        return conversation_id

    def list_matches(self, user_id: str) -> List[Conversation]:
        try:
            return self.db.list_conversations(user_id)
        except StoreError as exc:
            logger.warning("Could not load matches for %s: %s", user_id, exc)
            return []

    def swipe_analytics(self, user_id: str) -> SwipeAnalytics:
        try:
            swipes = self.db.get_swipes(user_id)
        except StoreError as exc:
            logger.warning("Could not load swipes for %s: %s", user_id, exc)
            swipes = []
        liked = [record for record in swipes if record.liked]
        return SwipeAnalytics(
            right_swipes=len(liked),
            left_swipes=len(swipes) - len(liked),
            super_likes=sum(1 for record in liked if record.super_liked),
            mutual_matches=len(self.list_matches(user_id)),
        )
