class RoommateEngineError(Exception):
    """Base class for every error raised by the engine."""


class ConfigError(RoommateEngineError):
    pass


class StoreError(RoommateEngineError):
    """A profile store read or write failed."""


class SwipeWriteError(StoreError):
    """The swipe could not be persisted; no match check was attempted."""


class ProfileNotFoundError(RoommateEngineError):
    def __init__(self, user_id):
        super().__init__(f"No profile found for user {user_id}")
        self.user_id = user_id
