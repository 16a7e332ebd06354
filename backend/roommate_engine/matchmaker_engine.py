import logging
from typing import List, Optional

from backend.roommate_engine.config import EngineConfig
from backend.roommate_engine.errors import ProfileNotFoundError, StoreError
from backend.roommate_engine.lifecycle.match_lifecycle import MatchLifecycleManager
from backend.roommate_engine.match_pool.match_pool_manager import MatchPoolManager
from backend.roommate_engine.models.filter_settings import FilterSettings
from backend.roommate_engine.models.swipe import Conversation, SwipeAnalytics
from backend.roommate_engine.models.user_profile import UserProfile
from backend.roommate_engine.ranking.ranking_pipeline import RankedCandidate, RankingPipeline
from backend.roommate_engine.scoring.compatibility_scorer import CompatibilityBreakdown, CompatibilityScorer
from backend.roommate_engine.scoring.filter_scorer import FilterScorer
from backend.roommate_engine.session import Session

logger = logging.getLogger(__name__)


class MatchMakerEngine:
    """Entry point used by the presentation layer for one signed-in user."""

    def __init__(self, db, session: Session, weights: Optional[dict] = None, config: Optional[EngineConfig] = None):
        config = config or EngineConfig()
        self.db = db
        self.session = session
        self.scorer = CompatibilityScorer(weights)
        self.pool = MatchPoolManager(db, fetch_workers=config.fetch_workers, exclude_blocked_by=config.exclude_blocked_by)
        self.ranking = RankingPipeline(FilterScorer(), self.scorer)
        self.lifecycle = MatchLifecycleManager(db, session)

    def _me(self) -> Optional[UserProfile]:
        try:
            me = self.db.get_profile(self.session.user_id)
        except StoreError as exc:
            logger.warning("Could not load profile %s: %s", self.session.user_id, exc)
            return None
        if me is None:
            logger.warning("No profile stored for %s", self.session.user_id)
        return me

    def _require_me(self) -> UserProfile:
        me = self._me()
        if me is None:
            raise ProfileNotFoundError(self.session.user_id)
        return me

    def _filter_settings(self, filter_settings: Optional[FilterSettings]) -> FilterSettings:
        if filter_settings is not None:
            return filter_settings
        try:
            saved = self.db.get_filter_settings(self.session.user_id)
        except StoreError as exc:
            logger.warning("Could not load filter settings for %s: %s", self.session.user_id, exc)
            saved = None
        return saved or FilterSettings.empty(self.session.user_id)

    def explain_feed(self, filter_settings: Optional[FilterSettings] = None) -> List[RankedCandidate]:
        """Ranked candidates with their positions, scores and per-criterion results."""
        me = self._me()
        if me is None:
            return []
        pool = self.pool.assemble(me)
        return self.ranking.explain(pool, me, self._filter_settings(filter_settings))

    def get_ranked_feed(self, filter_settings: Optional[FilterSettings] = None) -> List[UserProfile]:
        """
        Rank the current pool for the session user. When a newer request
        started while this one was running, its result is returned but not
        published to the session.
        """
        token = self.session.begin_feed_request()
        feed = [entry.profile for entry in self.explain_feed(filter_settings)]
        if not self.session.publish_feed(token, feed):
            logger.info("Discarding stale feed request %d for %s", token, self.session.user_id)
        return feed

    def get_compatibility_breakdown(self, candidate_id: str) -> CompatibilityBreakdown:
        me = self._me()
        try:
            candidate = self.db.get_profile(candidate_id)
        except StoreError as exc:
            logger.warning("Could not load candidate %s: %s", candidate_id, exc)
            candidate = None
        if me is None or candidate is None:
            return CompatibilityBreakdown(overall=0.0, categories={})
        return self.scorer.breakdown(me, candidate)

    def record_swipe(self, candidate_id: str, liked: bool, super_liked: bool = False) -> bool:
        """Returns True when this swipe leaves the pair mutually liked."""
        return self.lifecycle.record_swipe(self.session.user_id, candidate_id, liked, super_liked)

    def list_matches(self) -> List[Conversation]:
        return self.lifecycle.list_matches(self.session.user_id)

    def get_swipe_analytics(self) -> SwipeAnalytics:
        return self.lifecycle.swipe_analytics(self.session.user_id)

    def block_user(self, candidate_id: str) -> None:
        me = self._require_me()
        self.db.set_blocked_users(me.id, me.blocked_user_ids | {candidate_id})

    def unblock_user(self, candidate_id: str) -> None:
        me = self._require_me()
        self.db.set_blocked_users(me.id, me.blocked_user_ids - {candidate_id})
