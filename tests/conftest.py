"""Shared test fixtures."""

import pytest

from state import new_game
from tests.helpers import make_started_game


@pytest.fixture
def game():
    """Fresh 15x11 game in the Setup Phase."""
    return new_game(15, 11)


@pytest.fixture
def started_game():
    """Both capitals founded; player1 in the Resource Phase of round 1."""
    return make_started_game()


@pytest.fixture
def api_client():
    """Flask test client."""
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
