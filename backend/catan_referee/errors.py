"""
Error types raised by the referee.

Rejections (``ActionRejected`` and subclasses) are expected, player-facing
outcomes: they are caught at the action boundary and turned into a
``success=False`` response for the acting player. Everything else signals a
caller-side contract violation and propagates.
"""


class ActionRejected(ValueError):
    """A player intent was refused by the rules; no state was changed."""


class InvalidParameters(ActionRejected):
    """Structured parameters for an action or follow-up were malformed."""


class UnknownPlayerError(LookupError):
    """An action referenced a player id that is not part of the session."""

    def __init__(self, player_id):
        super().__init__(f"Unknown player id: {player_id}")
        self.player_id = player_id


class FollowUpNotReadyError(RuntimeError):
    """A follow-up was executed before its setup() call supplied the decision."""


class ExpansionNotEnabledError(RuntimeError):
    """An expansion-only operation was invoked on a base-game session or player."""


class InvalidGameStateError(RuntimeError):
    """A session call was made while the session was in the wrong status."""
