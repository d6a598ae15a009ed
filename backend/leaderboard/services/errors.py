"""Error kinds surfaced by the leaderboard core.

Every service operation turns these into an outcome object; nothing here is
meant to escape to the HTTP or CLI layers as an exception.
"""

STORE_UNAVAILABLE = 'StoreUnavailable'
# Write rejected by the (game, player) unique constraint
STORE_CONFLICT = 'StoreConflict'
INVALID_INPUT = 'InvalidInput'
# Notice, not a failure: the submission proceeds with the capped value
CLAMPED_SCORE = 'ClampedScore'


class LeaderboardError(Exception):
    kind = 'LeaderboardError'

    def __init__(self, message: str = ''):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class StoreUnavailable(LeaderboardError):
    kind = STORE_UNAVAILABLE


class StoreConflict(LeaderboardError):
    kind = STORE_CONFLICT


class InvalidInput(LeaderboardError):
    kind = INVALID_INPUT
