import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def pair_key(*user_ids: str) -> str:
    """Canonical key of an unordered set of participants: ids sorted and joined."""
    return ":".join(sorted(user_ids))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> Optional[datetime]:
    if not isinstance(value, str):
        return value
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparsable swipe timestamp %r", value)
        return None


@dataclass(frozen=True)
class SwipeRecord:
    """One-directional, append-only swipe decision."""

    from_id: str
    to_id: str
    liked: bool
    super_liked: bool = False
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        # a super like is always a like
        if self.super_liked and not self.liked:
            object.__setattr__(self, "liked", True)

    @classmethod
    def from_dict(cls, data: dict) -> "SwipeRecord":
        timestamp = _parse_timestamp(data.get("timestamp"))
        return cls(
            from_id=data["from_id"],
            to_id=data["to_id"],
            liked=bool(data.get("liked", False)),
            super_liked=bool(data.get("super_liked", False)),
            timestamp=timestamp or _utcnow(),
        )

    def to_dict(self) -> dict:
        return {
            "from_id": self.from_id,
            "to_id": self.to_id,
            "liked": self.liked,
            "super_liked": self.super_liked,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Conversation:
    """Match record and chat thread of a mutually liked pair."""

    id: str
    participants: Tuple[str, ...]
    created_at: Optional[datetime] = None

    @property
    def pair_key(self) -> str:
        return pair_key(*self.participants)

    def includes(self, user_id: str) -> bool:
        return user_id in self.participants


@dataclass(frozen=True)
class SwipeAnalytics:
    right_swipes: int = 0
    left_swipes: int = 0
    super_likes: int = 0
    mutual_matches: int = 0
