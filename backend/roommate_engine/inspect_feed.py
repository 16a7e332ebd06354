"""
Print a user's ranked feed with per-criterion results.

Usage:
    python -m backend.roommate_engine.inspect_feed USER_ID [--limit N]
"""

import argparse
import logging

from backend.roommate_engine.config import EngineConfig, build_store, configure_logging
from backend.roommate_engine.matchmaker_engine import MatchMakerEngine
from backend.roommate_engine.session import Session

logger = logging.getLogger(__name__)


def format_entry(entry) -> str:
    name = entry.profile.first_name or entry.profile.id
    position = entry.position if entry.position is not None else "excluded"
    failed = sorted(criterion.value for criterion, passed in entry.criteria.items() if not passed)
    return (
        f"{position!s:>8}  {name:<24} filter={entry.filter_score:<3} "
        f"smart={entry.smart_score:6.2f}  failed: {', '.join(failed) or '-'}"
    )


def main(argv=None, store=None) -> int:
    parser = argparse.ArgumentParser(description="Inspect the ranked roommate feed of one user")
    parser.add_argument("user_id")
    parser.add_argument("--limit", type=int, default=20)
    args = parser.parse_args(argv)

    config = EngineConfig.from_env()
    configure_logging(config.log_level)

    engine = MatchMakerEngine(store or build_store(config), Session(args.user_id), config=config)
    explained = engine.explain_feed()
    if not explained:
        logger.warning("No candidates for %s", args.user_id)
        return 1

    for entry in explained[:args.limit]:
        print(format_entry(entry))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
