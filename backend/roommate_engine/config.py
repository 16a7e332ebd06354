import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from backend.roommate_engine.errors import ConfigError

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
STORE_BACKENDS = ("memory", "postgres", "supabase")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class EngineConfig:
    store_backend: str = "postgres"

    pg_db: Optional[str] = None
    pg_user: Optional[str] = None
    pg_password: Optional[str] = None
    pg_host: Optional[str] = None
    pg_port: int = 5432

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    fetch_workers: int = 2
    exclude_blocked_by: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build the configuration from environment variables (a ``.env`` file
        is loaded on import).
        """
        env = os.environ if env is None else env

        backend = env.get("ROOMMATE_STORE", "postgres").strip().lower()
        if backend not in STORE_BACKENDS:
            raise ConfigError(f"ROOMMATE_STORE must be one of {STORE_BACKENDS}, got {backend!r}")

        fetch_workers = _env_int(env, "ROOMMATE_FETCH_WORKERS", 2)
        if fetch_workers < 1:
            raise ConfigError("ROOMMATE_FETCH_WORKERS must be at least 1")

        return cls(
            store_backend=backend,
            pg_db=env.get("PG_DB"),
            pg_user=env.get("PG_USER"),
            pg_password=env.get("PG_PASSWORD"),
            pg_host=env.get("PG_HOST"),
            pg_port=_env_int(env, "PG_PORT", 5432),
            supabase_url=env.get("SUPABASE_URL"),
            supabase_key=env.get("SUPABASE_KEY"),
            fetch_workers=fetch_workers,
            exclude_blocked_by=_env_bool(env, "ROOMMATE_EXCLUDE_BLOCKED_BY", False),
            log_level=env.get("ROOMMATE_LOG_LEVEL", "INFO").strip().upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def build_store(config: EngineConfig):
    """Instantiate the profile store selected by ``config.store_backend``."""
    if config.store_backend == "memory":
        from backend.roommate_engine.interfaces.memory_store import InMemoryProfileStore
        return InMemoryProfileStore()
    if config.store_backend == "supabase":
        from backend.roommate_engine.interfaces.supabase_interface import SupabaseProfileStore
        return SupabaseProfileStore(config)
    from backend.roommate_engine.interfaces.db_interface import DatabaseInterface
    return DatabaseInterface(config)
