"""
Command boundary: ``(actionKind, playerId, parameters)`` in, per-player responses out.
"""
from typing import TYPE_CHECKING, Any, Dict, Optional

from .actions import ActionRegistry, Responses
from .errors import InvalidParameters

if TYPE_CHECKING:
    from .referee import Referee


def handle_command(
    referee: "Referee",
    action_kind: str,
    player_id: int,
    parameters: Optional[Dict[str, Any]] = None,
) -> Responses:
    """Route one command to an ordinary action or to the player's pending decision.

    Unknown players are fatal; every other problem comes back as a failed
    response for the acting player.
    """
    referee.player(player_id)

    action_cls = ActionRegistry.get_action(action_kind)
    if action_cls is not None:
        try:
            action = action_cls(referee, player_id, parameters)
        except InvalidParameters as exc:
            return referee.reject(player_id, action_kind, str(exc))
        return action.execute(referee)

    if not ActionRegistry.is_follow_up(action_kind):
        return referee.reject(player_id, action_kind, f"Unknown action: {action_kind}")

    follow_up = referee.next_follow_up(player_id)
    if follow_up is None or follow_up.kind != action_kind:
        owed = f"; you need to {follow_up.prompt}" if follow_up is not None else ""
        return referee.reject(player_id, action_kind, f"No pending {action_kind} decision{owed}")
    try:
        follow_up.setup(referee, player_id, parameters)
    except InvalidParameters as exc:
        return referee.reject(player_id, action_kind, str(exc))
    return follow_up.execute(referee)
