import logging

from supabase import Client, create_client

from backend.roommate_engine.config import EngineConfig
from backend.roommate_engine.errors import StoreError
from backend.roommate_engine.interfaces.profile_store import ProfileStore
from backend.roommate_engine.models.filter_settings import FilterSettings
from backend.roommate_engine.models.swipe import Conversation, SwipeRecord, pair_key
from backend.roommate_engine.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


def _profile_from_row(row: dict) -> UserProfile:
    return UserProfile({**(row.get("data") or {}), "id": row["id"]})


def _swipe_from_row(row: dict) -> SwipeRecord:
    return SwipeRecord.from_dict({**row, "timestamp": row.get("created_at")})


class SupabaseProfileStore(ProfileStore):
    """Profile store on top of the Supabase REST API, same tables as schema.sql."""

    def __init__(self, config: EngineConfig = None, client: Client = None):
        if client is None:
            config = config or EngineConfig.from_env()
            if not config.supabase_url or not config.supabase_key:
                raise StoreError("SUPABASE_URL and SUPABASE_KEY must be set")
            client = create_client(config.supabase_url, config.supabase_key)
        self.client = client

    def _run(self, query) -> list:
        try:
            return query.execute().data or []
        except Exception as exc:
            raise StoreError(f"Supabase request failed: {exc}") from exc

    def get_profile(self, user_id):
        rows = self._run(self.client.table("profiles").select("id, data").eq("id", user_id).limit(1))
        return _profile_from_row(rows[0]) if rows else None

    def get_all_profiles(self):
        rows = self._run(self.client.table("profiles").select("id, data").order("created_at"))
        return [_profile_from_row(row) for row in rows]

    def get_filter_settings(self, user_id):
        rows = self._run(self.client.table("filter_settings").select("data").eq("user_id", user_id).limit(1))
        if not rows:
            return None
        return FilterSettings({**(rows[0].get("data") or {}), "user_id": user_id})

    def get_swipes(self, from_id, to_id=None, liked=None):
        query = self.client.table("swipes").select("from_id, to_id, liked, super_liked, created_at").eq("from_id", from_id)
        if to_id is not None:
            query = query.eq("to_id", to_id)
        if liked is not None:
            query = query.eq("liked", liked)
        return [_swipe_from_row(row) for row in self._run(query.order("created_at"))]

    def put_swipe(self, record):
        row = record.to_dict()
        row["created_at"] = row.pop("timestamp")
        self._run(self.client.table("swipes").insert(row))

    def find_conversation(self, user_a, user_b):
        rows = self._run(
            self.client.table("conversations").select("id").contains("participants", [user_a, user_b]).limit(1)
        )
        return rows[0]["id"] if rows else None

    def create_conversation(self, participants):
        participants = list(participants)
        key = pair_key(*participants)
        self._run(
            self.client.table("conversations").upsert(
                {"pair_key": key, "participants": participants},
                on_conflict="pair_key",
                ignore_duplicates=True,
            )
        )
        rows = self._run(self.client.table("conversations").select("id").eq("pair_key", key).limit(1))
        if not rows:
            raise StoreError(f"Conversation {key} was not stored")
        return rows[0]["id"]

    def list_conversations(self, user_id):
        rows = self._run(
            self.client.table("conversations")
            .select("id, participants, created_at")
            .contains("participants", [user_id])
            .order("created_at", desc=True)
        )
        return [
            Conversation(id=row["id"], participants=tuple(row["participants"]), created_at=row.get("created_at"))
            for row in rows
        ]

    def set_blocked_users(self, user_id, blocked_ids):
        rows = self._run(self.client.table("profiles").select("data").eq("id", user_id).limit(1))
        if not rows:
            raise StoreError(f"No profile stored for {user_id}")
        data = dict(rows[0].get("data") or {})
        data["blocked_user_ids"] = sorted(blocked_ids)
        self._run(self.client.table("profiles").update({"data": data}).eq("id", user_id))
