import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from backend.roommate_engine.errors import StoreError
from backend.roommate_engine.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


class MatchPoolManager:
    """
    Assembles the candidates a user may still swipe on: everybody except
    themselves, people they already swiped on (liked or not) and people
    they blocked.

    Profiles that blocked the acting user stay in the pool unless
    ``exclude_blocked_by`` is switched on.
    """

    def __init__(self, db, fetch_workers: int = 2, exclude_blocked_by: bool = False):
        self.db = db
        self.fetch_workers = fetch_workers
        self.exclude_blocked_by = exclude_blocked_by

    def assemble(self, me: UserProfile) -> List[UserProfile]:
        """
        Fetch all profiles and my swipe history concurrently, then filter.
        Any fetch failure yields an empty pool.
        """
        with ThreadPoolExecutor(max_workers=self.fetch_workers) as pool:
            profiles_future = pool.submit(self.db.get_all_profiles)
            swipes_future = pool.submit(self.db.get_swipes, me.id)
            try:
                profiles = profiles_future.result()
                swipes = swipes_future.result()
            except StoreError as exc:
                logger.warning("Candidate pool for %s unavailable, returning no candidates: %s", me.id, exc)
                return []

        already_decided = {record.to_id for record in swipes}
        excluded = already_decided | set(me.blocked_user_ids) | {me.id}

        candidates = []
        blocked_me = 0
        for profile in profiles:
            if profile.id in excluded:
                continue
            if me.id in profile.blocked_user_ids:
                blocked_me += 1
                if self.exclude_blocked_by:
                    continue
            candidates.append(profile)

        if blocked_me and not self.exclude_blocked_by:
            logger.debug("%d profiles in %s's pool have blocked them", blocked_me, me.id)
        logger.info("Assembled %d candidates for %s (%d excluded)", len(candidates), me.id, len(profiles) - len(candidates))
        return candidates
