"""
Pytest configuration and shared fixtures for referee tests.
"""
import pytest

from catan_referee import handle_command
from helpers import ScriptedRandom, make_referee


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def base_game(rng):
    """Two-player base game, player 0 to roll."""
    return make_referee(num_players=2, rng=rng)


@pytest.fixture
def rolled_base_game(base_game):
    """Base game where player 0 has rolled a 2 that produces nothing."""
    base_game.set_overridden_dice(1, 1)
    handle_command(base_game, "rollDice", 0, {})
    return base_game


@pytest.fixture
def ck_game(rng):
    """Three-player Cities & Knights game, player 0 to roll."""
    return make_referee(num_players=3, expansion=True, rng=rng)


@pytest.fixture
def rolled_ck_game(ck_game):
    """Cities & Knights game where player 0 rolled a 2 with the trade gate showing."""
    ck_game.set_overridden_dice(1, 1)
    ck_game.rng.queue(4)  # nobody has improvements, so nobody draws
    handle_command(ck_game, "rollDice", 0, {})
    return ck_game
