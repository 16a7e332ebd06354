from backend.roommate_engine.errors import StoreError
from backend.roommate_engine.interfaces.memory_store import InMemoryProfileStore
from backend.roommate_engine.match_pool.match_pool_manager import MatchPoolManager
from backend.roommate_engine.models.swipe import SwipeRecord

from conftest import make_profile


class FailingStore(InMemoryProfileStore):
    def __init__(self, fail, **kwargs):
        super().__init__(**kwargs)
        self.fail = fail

    def get_all_profiles(self):
        if self.fail == "profiles":
            raise StoreError("profiles unavailable")
        return super().get_all_profiles()

    def get_swipes(self, from_id, to_id=None, liked=None):
        if self.fail == "swipes":
            raise StoreError("swipes unavailable")
        return super().get_swipes(from_id, to_id, liked)


def ids(profiles):
    return [profile.id for profile in profiles]


def test_excludes_self_swiped_and_blocked():
    me = make_profile("me", blocked_user_ids=["blocked"])
    store = InMemoryProfileStore(profiles=[
        me, make_profile("liked"), make_profile("passed"), make_profile("blocked"), make_profile("fresh"),
    ])
    store.put_swipe(SwipeRecord("me", "liked", liked=True))
    store.put_swipe(SwipeRecord("me", "passed", liked=False))
    store.put_swipe(SwipeRecord("someone-else", "fresh", liked=True))

    assert ids(MatchPoolManager(store).assemble(me)) == ["fresh"]


def test_profiles_that_blocked_me_stay_visible_by_default():
    me = make_profile("me")
    store = InMemoryProfileStore(profiles=[me, make_profile("blocker", blocked_user_ids=["me"])])

    assert ids(MatchPoolManager(store).assemble(me)) == ["blocker"]
    assert ids(MatchPoolManager(store, exclude_blocked_by=True).assemble(me)) == []


def test_pool_keeps_store_order():
    me = make_profile("me")
    store = InMemoryProfileStore(profiles=[make_profile(name) for name in "dcba"] + [me])
    assert ids(MatchPoolManager(store, fetch_workers=1).assemble(me)) == ["d", "c", "b", "a"]


def test_fetch_failures_fail_open():
    me = make_profile("me")
    for fail in ("profiles", "swipes"):
        store = FailingStore(fail, profiles=[me, make_profile("other")])
        assert MatchPoolManager(store).assemble(me) == []
