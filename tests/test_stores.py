from datetime import datetime, timezone
from unittest import mock

import psycopg2
import pytest

from backend.roommate_engine.errors import StoreError
from backend.roommate_engine.interfaces.db_interface import DatabaseInterface
from backend.roommate_engine.interfaces.memory_store import InMemoryProfileStore
from backend.roommate_engine.interfaces.supabase_interface import SupabaseProfileStore
from backend.roommate_engine.match_pool.match_pool_manager import MatchPoolManager
from backend.roommate_engine.models.swipe import SwipeRecord
from backend.roommate_engine.models.user_profile import UserProfile


@pytest.fixture
def connection():
    return mock.MagicMock()


@pytest.fixture
def cursor(connection):
    return connection.cursor.return_value.__enter__.return_value


@pytest.fixture
def database(connection):
    return DatabaseInterface(connection=connection)


def test_database_reads_profiles(database, cursor):
    cursor.fetchone.return_value = ("u1", {"college_name": "Boston University", "cleanliness": "4"})
    profile = database.get_profile("u1")
    assert profile.id == "u1"
    assert profile.cleanliness == 4
    assert cursor.execute.call_args[0][1] == ("u1",)


def test_database_narrows_swipe_queries(database, cursor):
    created = datetime(2025, 1, 1, tzinfo=timezone.utc)
    cursor.fetchall.return_value = [("b", "a", True, False, created)]
    swipes = database.get_swipes("b", to_id="a", liked=True)

    query, params = cursor.execute.call_args[0]
    assert "to_id = %s" in query and "liked = %s" in query
    assert params == ("b", "a", True)
    assert swipes == [SwipeRecord("b", "a", liked=True, timestamp=created)]


def test_database_conversation_conflict_returns_existing_id(database, cursor):
    cursor.fetchone.side_effect = [None, ("conversation-7",)]
    assert database.create_conversation(["b", "a"]) == "conversation-7"
    insert_params = cursor.execute.call_args_list[0][0][1]
    assert insert_params == ("a:b", ["b", "a"])


def test_database_errors_become_store_errors(database, cursor):
    cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")
    with pytest.raises(StoreError):
        database.get_all_profiles()


@pytest.fixture
def client():
    return mock.MagicMock()


def test_supabase_reads_profile(client):
    query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    query.execute.return_value.data = [{"id": "u1", "data": {"housing_status": "Looking for Lease"}}]

    profile = SupabaseProfileStore(client=client).get_profile("u1")
    assert profile.id == "u1"
    assert profile.housing_status.value == "Looking for Lease"
    client.table.assert_called_with("profiles")


def test_supabase_create_conversation_upserts_on_pair_key(client):
    table = client.table.return_value
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value.data = [{"id": "c-1"}]

    assert SupabaseProfileStore(client=client).create_conversation(["b", "a"]) == "c-1"
    table.upsert.assert_called_once_with(
        {"pair_key": "a:b", "participants": ["b", "a"]}, on_conflict="pair_key", ignore_duplicates=True
    )


def test_supabase_failures_become_store_errors(client):
    client.table.return_value.insert.return_value.execute.side_effect = RuntimeError("503")
    with pytest.raises(StoreError):
        SupabaseProfileStore(client=client).put_swipe(SwipeRecord("a", "b", liked=True))


def test_memory_store_create_conversation_is_idempotent():
    store = InMemoryProfileStore()
    first = store.create_conversation(["a", "b"])
    assert store.create_conversation(["b", "a"]) == first
    assert store.find_conversation("b", "a") == first
    assert len(store.list_conversations("a")) == 1


def test_memory_store_rejects_profiles_without_id():
    with pytest.raises(StoreError):
        InMemoryProfileStore(profiles=[{"first_name": "Nobody"}])


def test_unparsable_swipe_timestamp_is_treated_as_missing():
    record = SwipeRecord.from_dict({"from_id": "a", "to_id": "b", "liked": True, "timestamp": "yesterday"})
    assert record.liked
    assert record.timestamp.tzinfo is not None


def test_supabase_pool_survives_malformed_swipe_rows(client):
    select = client.table.return_value.select.return_value
    select.order.return_value.execute.return_value.data = [
        {"id": "me", "data": {}}, {"id": "b", "data": {}}, {"id": "c", "data": {}},
    ]
    select.eq.return_value.order.return_value.execute.return_value.data = [
        {"from_id": "me", "to_id": "b", "liked": True, "super_liked": False, "created_at": "yesterday"},
    ]

    me = UserProfile({"id": "me"})
    pool = MatchPoolManager(SupabaseProfileStore(client=client)).assemble(me)
    assert [profile.id for profile in pool] == ["c"]
