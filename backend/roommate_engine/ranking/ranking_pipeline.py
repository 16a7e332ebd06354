import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from backend.roommate_engine.models.filter_settings import FilterSettings
from backend.roommate_engine.models.user_profile import UserProfile
from backend.roommate_engine.scoring.compatibility_scorer import CompatibilityScorer
from backend.roommate_engine.scoring.filter_scorer import Criterion, FilterScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedCandidate:
    profile: UserProfile
    filter_score: int
    smart_score: float
    criteria: Dict[Criterion, bool]
    # 1-based; None when the candidate matched no filter criterion
    position: Optional[int] = None


class RankingPipeline:
    """
    Orders a candidate pool by filter score, then smart score. Candidates
    scoring zero on the filter stay at the tail in pool order without a
    position. Pure: the same inputs always give the same order.
    """

    def __init__(self, filter_scorer: FilterScorer, compatibility_scorer: CompatibilityScorer):
        self.filter_scorer = filter_scorer
        self.compatibility_scorer = compatibility_scorer

    def explain(self, pool: Sequence[UserProfile], me: UserProfile, filter_settings: FilterSettings) -> List[RankedCandidate]:
        scored, unmatched = [], []
        for candidate in pool:
            result = self.filter_scorer.score(filter_settings, me, candidate)
            entry = (candidate, result, self.compatibility_scorer.smart_score(me, candidate))
            (scored if result.score > 0 else unmatched).append(entry)

        # list.sort is stable with reverse=True, ties keep pool order
        scored.sort(key=lambda entry: (entry[1].score, entry[2]), reverse=True)

        ranked = [
            RankedCandidate(candidate, result.score, smart, result.breakdown, position)
            for position, (candidate, result, smart) in enumerate(scored, start=1)
        ]
        ranked.extend(
            RankedCandidate(candidate, result.score, smart, result.breakdown)
            for candidate, result, smart in unmatched
        )
        logger.debug("Ranked %d candidates for %s, %d without filter matches", len(ranked), me.id, len(unmatched))
        return ranked

    def rank(self, pool: Sequence[UserProfile], me: UserProfile, filter_settings: FilterSettings) -> List[UserProfile]:
        return [entry.profile for entry in self.explain(pool, me, filter_settings)]
