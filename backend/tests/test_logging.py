"""
Tests for structured game event logging.
"""
from structlog.testing import capture_logs

from catan_referee import handle_command
from helpers import make_referee


def test_accepted_and_rejected_actions_are_logged():
    with capture_logs() as logs:
        referee = make_referee(num_players=2)
        handle_command(referee, "endTurn", 1, {})
        referee.set_overridden_dice(1, 1)
        handle_command(referee, "rollDice", 0, {})

    rejected = [e for e in logs if e["event"] == "action_rejected"]
    accepted = [e for e in logs if e["event"] == "action_accepted"]
    assert rejected[0]["player_id"] == 1
    assert rejected[0]["action"] == "endTurn"
    assert accepted[0]["action"] == "rollDice"
    assert accepted[0]["game_id"] == "test_game"


def test_lifecycle_events_are_logged():
    with capture_logs() as logs:
        make_referee(num_players=2)
    events = [e["event"] for e in logs]
    assert events.count("player_joined") == 2
    assert "status_changed" in events
    assert "turn_started" in events
