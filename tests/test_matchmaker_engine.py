from unittest import mock

import pytest

from backend.roommate_engine.errors import ProfileNotFoundError, StoreError
from backend.roommate_engine.matchmaker_engine import MatchMakerEngine
from backend.roommate_engine.models.swipe import SwipeRecord
from backend.roommate_engine.session import Session

from conftest import make_filter


def ids(profiles):
    return [profile.id for profile in profiles]


def test_ranked_feed_puts_best_match_first(engine):
    fs = make_filter(housing_status="Looking for Roommate", college_name="Boston University",
                     interests="hiking, coding", cleanliness=4)
    feed = engine.get_ranked_feed(fs)
    assert ids(feed)[0] == "lease-seeker"
    assert set(ids(feed)) == {"lease-seeker", "other-roommate", "together"}
    assert engine.session.latest_feed == feed


def test_feed_uses_saved_filter_settings(engine, store):
    store.save_filter_settings({"user_id": "me", "housing_status": "Looking for Roommate"})
    explained = engine.explain_feed()
    assert explained[0].profile.id == "lease-seeker"
    assert explained[0].position == 1


def test_swiped_candidates_leave_the_feed(engine):
    engine.record_swipe("together", liked=False)
    assert "together" not in ids(engine.get_ranked_feed(make_filter()))


def test_feed_is_empty_without_a_profile(store):
    engine = MatchMakerEngine(store, Session("ghost"))
    assert engine.get_ranked_feed(make_filter()) == []


def test_feed_fails_open_when_store_is_down(engine, store):
    store.get_all_profiles = mock.Mock(side_effect=StoreError("down"))
    assert engine.get_ranked_feed(make_filter()) == []


def test_stale_feed_is_not_published(engine):
    original_explain = engine.explain_feed

    def newer_request_arrives(filter_settings=None):
        engine.session.begin_feed_request()
        return original_explain(filter_settings)

    engine.explain_feed = newer_request_arrives
    feed = engine.get_ranked_feed(make_filter())
    assert feed
    assert engine.session.latest_feed is None


def test_compatibility_breakdown(engine):
    overall, categories = engine.get_compatibility_breakdown("lease-seeker")
    assert overall == pytest.approx(87.5)
    assert categories["housing"] == 10.0


def test_compatibility_breakdown_for_unknown_candidate(engine):
    assert engine.get_compatibility_breakdown("nobody") == (0.0, {})


def test_mutual_match_through_engine(engine, store):
    assert engine.record_swipe("lease-seeker", liked=True) is False
    other_side = MatchMakerEngine(store, Session("lease-seeker"))
    assert other_side.record_swipe("me", liked=True) is True

    matches = engine.list_matches()
    assert len(matches) == 1
    assert engine.get_swipe_analytics().mutual_matches == 1


def test_custom_weights_are_validated(store, session):
    with pytest.raises(ValueError):
        MatchMakerEngine(store, session, weights={"housing": 10})


def test_block_and_unblock(engine, store):
    engine.block_user("together")
    assert store.get_profile("me").blocked_user_ids == {"together"}
    assert "together" not in ids(engine.get_ranked_feed(make_filter()))

    engine.unblock_user("together")
    assert store.get_profile("me").blocked_user_ids == set()
    assert "together" in ids(engine.get_ranked_feed(make_filter()))


def test_block_requires_a_profile(store):
    with pytest.raises(ProfileNotFoundError):
        MatchMakerEngine(store, Session("ghost")).block_user("me")


def test_feed_excludes_previous_swipes_regardless_of_decision(engine, store):
    store.put_swipe(SwipeRecord("me", "lease-seeker", liked=True))
    store.put_swipe(SwipeRecord("me", "other-roommate", liked=False))
    assert ids(engine.get_ranked_feed(make_filter())) == ["together"]
