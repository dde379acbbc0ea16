import logging

import pytest

from americano.exceptions import (
    InsufficientRoster, InvalidScore, InvalidSession, MatchNotFound, SessionNotFound,
)

NAMES = ["Ana", "Ben", "Cleo", "Dan", "Eva", "Finn", "Gus", "Hana"]


@pytest.fixture
def session(store):
    return store.create("Friday Americano", 2, NAMES, points_per_game=21)


def test_create_strips_names_and_starts_empty(store):
    session = store.create("  Friday  ", 1, [" Ana", "Ben ", "", "Cleo", "Dan"])

    assert session.name == "Friday"
    assert [p.name for p in session.players] == ["Ana", "Ben", "Cleo", "Dan"]
    assert all(p.games_played == 0 for p in session.players)
    assert session.matches == []
    assert session.current_round == 0
    assert store.get(session.id) is session


@pytest.mark.parametrize("courts,names,points", [
    (1, ["Ana", "Ben", "Cleo"], 0),
    (1, ["Ana", "Ben", "Cleo", "Ana"], 0),
    (0, NAMES, 0),
    (3, NAMES, 0),
    (1, NAMES, -1),
])
def test_create_rejects_invalid_setup(store, courts, names, points):
    with pytest.raises(InvalidSession):
        store.create("Bad", courts, names, points_per_game=points)
    assert store.list() == []


def test_generate_round_applies_matches_and_counts(store, session):
    matches = store.generate_next_round(session.id)

    assert len(matches) == 2
    assert session.current_round == 1
    assert session.matches == matches
    assert all(p.games_played == 1 for p in session.players)
    assert store.current_round_matches(session.id) == matches


def test_games_played_follows_history(store):
    session = store.create("Odd", 1, NAMES[:5])

    for _ in range(6):
        store.generate_next_round(session.id)

    for player in session.players:
        appearances = sum(player.name in m.players for m in session.matches)
        assert player.games_played == appearances
    assert session.current_round == 6


def test_failed_round_leaves_session_untouched(store, session):
    store.generate_next_round(session.id)
    before = list(session.matches)
    session.courts = 3

    with pytest.raises(InsufficientRoster):
        store.generate_next_round(session.id)

    assert session.matches == before
    assert session.current_round == 1
    assert all(p.games_played == 1 for p in session.players)


def test_score_round_trip_by_match_id(store, session):
    first, second = store.generate_next_round(session.id)

    store.update_match_score(session.id, first.match_id, (15, 6))

    assert first.match_score == (15, 6)
    assert second.match_score is None

    store.update_match_score(session.id, first.match_id, (15, 6))
    assert first.match_score == (15, 6)

    store.update_match_score(session.id, first.match_id, (10, 11))
    assert first.match_score == (10, 11)
    assert second.match_score is None


def test_score_must_match_points_per_game(store, session):
    match = store.generate_next_round(session.id)[0]

    with pytest.raises(InvalidScore):
        store.update_match_score(session.id, match.match_id, (21, 1))
    with pytest.raises(InvalidScore):
        store.update_match_score(session.id, match.match_id, (-1, 22))
    assert match.match_score is None


def test_free_scoring_without_points_per_game(store):
    session = store.create("Free", 1, NAMES[:4])
    match = store.generate_next_round(session.id)[0]

    store.update_match_score(session.id, match.match_id, (6, 4))

    assert match.match_score == (6, 4)


def test_unknown_match_and_session(store, session):
    with pytest.raises(MatchNotFound):
        store.update_match_score(session.id, "nope", (10, 11))
    with pytest.raises(SessionNotFound):
        store.get("missing")
    with pytest.raises(SessionNotFound):
        store.generate_next_round("missing")


def test_delete_is_idempotent(store, session):
    store.delete(session.id)
    store.delete(session.id)

    with pytest.raises(SessionNotFound):
        store.get(session.id)


def test_round_decisions_are_logged(store, session, caplog):
    with caplog.at_level(logging.DEBUG, logger="americano.session"):
        store.generate_next_round(session.id)

    assert sum("anchor=" in r.getMessage() for r in caplog.records) == 2
    assert sum("teams=" in r.getMessage() for r in caplog.records) == 2
