import pytest

from backend.roommate_engine.config import EngineConfig, build_store
from backend.roommate_engine.errors import ConfigError
from backend.roommate_engine.interfaces.memory_store import InMemoryProfileStore


def test_defaults():
    config = EngineConfig.from_env({})
    assert config.store_backend == "postgres"
    assert config.fetch_workers == 2
    assert config.exclude_blocked_by is False
    assert config.log_level == "INFO"


def test_reads_environment():
    config = EngineConfig.from_env({
        "ROOMMATE_STORE": "Supabase",
        "SUPABASE_URL": "https://example.supabase.co",
        "SUPABASE_KEY": "key",
        "PG_PORT": "6543",
        "ROOMMATE_FETCH_WORKERS": "4",
        "ROOMMATE_EXCLUDE_BLOCKED_BY": "yes",
        "ROOMMATE_LOG_LEVEL": "debug",
    })
    assert config.store_backend == "supabase"
    assert config.pg_port == 6543
    assert config.fetch_workers == 4
    assert config.exclude_blocked_by is True
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("env", [
    {"ROOMMATE_STORE": "mongo"},
    {"ROOMMATE_FETCH_WORKERS": "many"},
    {"ROOMMATE_FETCH_WORKERS": "0"},
    {"ROOMMATE_EXCLUDE_BLOCKED_BY": "sometimes"},
])
def test_invalid_values(env):
    with pytest.raises(ConfigError):
        EngineConfig.from_env(env)


def test_build_memory_store():
    assert isinstance(build_store(EngineConfig(store_backend="memory")), InMemoryProfileStore)
