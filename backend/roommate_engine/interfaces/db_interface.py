import logging

import psycopg2
from psycopg2.extras import Json

from backend.roommate_engine.config import EngineConfig
from backend.roommate_engine.errors import StoreError
from backend.roommate_engine.interfaces.profile_store import ProfileStore
from backend.roommate_engine.models.filter_settings import FilterSettings
from backend.roommate_engine.models.swipe import Conversation, SwipeRecord, pair_key
from backend.roommate_engine.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


def _profile_from_row(row):
    user_id, data = row
    return UserProfile({**(data or {}), "id": user_id})


def _swipe_from_row(row):
    from_id, to_id, liked, super_liked, created_at = row
    return SwipeRecord.from_dict({
        "from_id": from_id,
        "to_id": to_id,
        "liked": liked,
        "super_liked": super_liked,
        "timestamp": created_at,
    })


class DatabaseInterface(ProfileStore):
    """
    PostgreSQL profile store (see schema.sql). Each call uses its own cursor
    so the connection can be shared by the fetch fan-out threads.
    """

    def __init__(self, config: EngineConfig = None, connection=None):
        if connection is None:
            config = config or EngineConfig.from_env()
            try:
                connection = psycopg2.connect(
                    dbname=config.pg_db,
                    user=config.pg_user,
                    password=config.pg_password,
                    host=config.pg_host,
                    port=config.pg_port,
                )
            except psycopg2.Error as exc:
                raise StoreError(f"Could not connect to postgres at {config.pg_host}: {exc}") from exc
        self.conn = connection
        self.conn.autocommit = True

    def _execute(self, query, params=(), fetch="all"):
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                if fetch == "all":
                    return cur.fetchall()
                if fetch == "one":
                    return cur.fetchone()
                return None
        except psycopg2.Error as exc:
            raise StoreError(f"Database error: {exc}") from exc

    def get_profile(self, user_id):
        row = self._execute("SELECT id, data FROM profiles WHERE id = %s", (user_id,), fetch="one")
        return _profile_from_row(row) if row else None

    def get_all_profiles(self):
        rows = self._execute("SELECT id, data FROM profiles ORDER BY created_at, id")
        return [_profile_from_row(row) for row in rows]

    def get_filter_settings(self, user_id):
        row = self._execute("SELECT data FROM filter_settings WHERE user_id = %s", (user_id,), fetch="one")
        if not row:
            return None
        return FilterSettings({**(row[0] or {}), "user_id": user_id})

    def get_swipes(self, from_id, to_id=None, liked=None):
        query = "SELECT from_id, to_id, liked, super_liked, created_at FROM swipes WHERE from_id = %s"
        params = [from_id]
        if to_id is not None:
            query += " AND to_id = %s"
            params.append(to_id)
        if liked is not None:
            query += " AND liked = %s"
            params.append(liked)
        query += " ORDER BY created_at"
        return [_swipe_from_row(row) for row in self._execute(query, tuple(params))]

    def put_swipe(self, record):
        self._execute("""
            INSERT INTO swipes (from_id, to_id, liked, super_liked, created_at)
            VALUES (%s, %s, %s, %s, %s)
        """, (record.from_id, record.to_id, record.liked, record.super_liked, record.timestamp), fetch=None)

    def find_conversation(self, user_a, user_b):
        row = self._execute("""
            SELECT id FROM conversations
            WHERE participants @> ARRAY[%s, %s]::text[]
            LIMIT 1
        """, (user_a, user_b), fetch="one")
        return row[0] if row else None

    def create_conversation(self, participants):
        participants = list(participants)
        key = pair_key(*participants)
        # the unique pair_key index settles concurrent creators
        row = self._execute("""
            INSERT INTO conversations (pair_key, participants)
            VALUES (%s, %s)
            ON CONFLICT (pair_key) DO NOTHING
            RETURNING id
        """, (key, participants), fetch="one")
        if row:
            return row[0]
        logger.info("Conversation %s already existed, reusing it", key)
        row = self._execute("SELECT id FROM conversations WHERE pair_key = %s", (key,), fetch="one")
        if not row:
            raise StoreError(f"Conversation {key} vanished after insert conflict")
        return row[0]

    def list_conversations(self, user_id):
        rows = self._execute("""
            SELECT id, participants, created_at FROM conversations
            WHERE %s = ANY(participants)
            ORDER BY created_at DESC
        """, (user_id,))
        return [Conversation(id=row[0], participants=tuple(row[1]), created_at=row[2]) for row in rows]

    def set_blocked_users(self, user_id, blocked_ids):
        self._execute("""
            UPDATE profiles
            SET data = jsonb_set(COALESCE(data, '{}'::jsonb), '{blocked_user_ids}', %s)
            WHERE id = %s
        """, (Json(sorted(blocked_ids)), user_id), fetch=None)

    def close(self):
        self.conn.close()
