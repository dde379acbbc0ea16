import random
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

import config
from americano.exceptions import (
    InvalidScore, InvalidSession, MatchNotFound, SchedulerError, SessionNotFound,
)
from americano.models import AmericanoSession, Match
from americano.session import SessionStore

router = APIRouter(prefix='/americano', tags=['Americano'])

# In-memory storage, replaced in tests through the get_store dependency
store = SessionStore(
    penalties=config.PENALTIES,
    rng=random.Random(config.SEED),
)

def get_store() -> SessionStore:
    return store


# -- Schemas -------------------------------------------------------------------

class SessionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    courts: int = Field(..., ge=1)
    player_names: List[str]
    points_per_game: int = Field(0, ge=0)


class ScoreUpdate(BaseModel):
    score: Tuple[int, int]


class PlayerOut(BaseModel):
    name: str
    games_played: int


class MatchOut(BaseModel):
    match_id: str
    round_number: int
    first_team: Tuple[str, str]
    second_team: Tuple[str, str]
    match_score: Optional[Tuple[int, int]] = None


class SessionOut(BaseModel):
    id: str
    name: str
    courts: int
    points_per_game: int
    current_round: int
    created_at: datetime
    players: List[PlayerOut]
    matches: List[MatchOut]


# -- Helpers -------------------------------------------------------------------

def _match_out(m: Match) -> MatchOut:
    return MatchOut(
        match_id=m.match_id, round_number=m.round_number,
        first_team=m.first_team, second_team=m.second_team,
        match_score=m.match_score,
    )


def _session_out(s: AmericanoSession) -> SessionOut:
    return SessionOut(
        id=s.id, name=s.name, courts=s.courts,
        points_per_game=s.points_per_game,
        current_round=s.current_round, created_at=s.created_at,
        players=[PlayerOut(name=p.name, games_played=p.games_played) for p in s.players],
        matches=[_match_out(m) for m in s.matches],
    )


def _get_session(sid: str, store: SessionStore) -> AmericanoSession:
    try:
        return store.get(sid)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")


# Routes

@router.post("/sessions", response_model=SessionOut, status_code=201)
async def create_session(body: SessionCreate, store: SessionStore = Depends(get_store)):
    try:
        session = store.create(body.name, body.courts, body.player_names, body.points_per_game)
    except InvalidSession as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _session_out(session)


@router.get("/sessions", response_model=List[SessionOut])
async def list_sessions(store: SessionStore = Depends(get_store)):
    return [_session_out(s) for s in store.list()]


@router.get("/sessions/{sid}", response_model=SessionOut)
async def get_session(sid: str, store: SessionStore = Depends(get_store)):
    return _session_out(_get_session(sid, store))


@router.delete("/sessions/{sid}", status_code=204)
async def delete_session(sid: str, store: SessionStore = Depends(get_store)):
    store.delete(sid)
    return Response(status_code=204)


@router.post("/sessions/{sid}/rounds", response_model=List[MatchOut], status_code=201)
async def next_round(sid: str, store: SessionStore = Depends(get_store)):
    _get_session(sid, store)
    try:
        matches = store.generate_next_round(sid)
    except SchedulerError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return [_match_out(m) for m in matches]


@router.get("/sessions/{sid}/rounds/current", response_model=List[MatchOut])
async def current_round(sid: str, store: SessionStore = Depends(get_store)):
    _get_session(sid, store)
    return [_match_out(m) for m in store.current_round_matches(sid)]


@router.put("/sessions/{sid}/matches/{match_id}/score", response_model=MatchOut)
async def update_score(
    sid: str,
    match_id: str,
    body: ScoreUpdate,
    store: SessionStore = Depends(get_store),
):
    _get_session(sid, store)
    try:
        match = store.update_match_score(sid, match_id, body.score)
    except MatchNotFound:
        raise HTTPException(status_code=404, detail="Match not found")
    except InvalidScore as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _match_out(match)
