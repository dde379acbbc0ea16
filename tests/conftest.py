import random

import pytest
from fastapi.testclient import TestClient

from americano.models import Match, Player
from americano.router import get_store
from americano.session import SessionStore
from main import app


def make_match(first, second, round_number=1, match_id=None, score=None):
    return Match(
        match_id=match_id or f"{round_number}-{''.join(first)}-{''.join(second)}",
        round_number=round_number,
        first_team=tuple(first),
        second_team=tuple(second),
        match_score=score,
    )


def make_roster(count):
    return [Player(name=f"P{i}") for i in range(1, count + 1)]


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture(name="store")
def store_fixture():
    return SessionStore(rng=random.Random(1234))


@pytest.fixture(name="client")
def client_fixture(store: SessionStore):
    """Test client wired to a fresh store instead of the module level one."""
    app.dependency_overrides[get_store] = lambda: store

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
