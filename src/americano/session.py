import logging
import random
from typing import Dict, List, Optional

from americano.exceptions import (
    InvalidScore, InvalidSession, MatchNotFound, SessionNotFound,
)
from americano.functions import compute_stats, plan_round
from americano.models import (
    AmericanoSession, Match, PenaltyConfig, Player, RoundPlan, Score, generate_id,
)

logger = logging.getLogger(__name__)


def _log_round(session: AmericanoSession, plan: RoundPlan):
    for decision in plan.decisions:
        selection, split = decision.selection, decision.split
        logger.debug(
            "session=%s round=%d court=%d anchor=%s forced_partner=%s filled=%s",
            session.id, plan.round_number, decision.court + 1,
            selection.anchor, selection.forced_partner, ", ".join(selection.filled),
        )
        logger.debug(
            "session=%s round=%d court=%d teams=%s vs %s score=%d filtered_out=%d fell_back=%s",
            session.id, plan.round_number, decision.court + 1,
            " & ".join(split.combination.first_team),
            " & ".join(split.combination.second_team),
            split.combination.combination_score,
            len(split.filtered_out), split.fell_back,
        )


class SessionStore:
    """In-memory Americano sessions. Applies generated rounds and entered scores."""

    def __init__(self, penalties: Optional[PenaltyConfig] = None, rng: Optional[random.Random] = None):
        self.penalties = penalties or PenaltyConfig()
        self.rng = rng or random.Random()
        self.sessions: Dict[str, AmericanoSession] = {}

    def create(self, name: str, courts: int, player_names: List[str], points_per_game: int = 0) -> AmericanoSession:
        names = [n.strip() for n in player_names if n and n.strip()]
        if len(names) < 4:
            raise InvalidSession("At least 4 players are required")
        if len(set(names)) != len(names):
            raise InvalidSession("Player names must be unique")
        if courts < 1:
            raise InvalidSession("At least 1 court is required")
        if courts > len(names) // 4:
            raise InvalidSession(f"{len(names)} players can fill at most {len(names) // 4} courts")
        if points_per_game < 0:
            raise InvalidSession("points_per_game must not be negative")

        session = AmericanoSession(
            id=generate_id(),
            name=name.strip(),
            courts=courts,
            points_per_game=points_per_game,
            players=[Player(name=n) for n in names],
        )
        self.sessions[session.id] = session
        logger.info("Created session %s (%d players, %d courts)", session.id, len(names), courts)
        return session

    def get(self, session_id: str) -> AmericanoSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def list(self) -> List[AmericanoSession]:
        return list(self.sessions.values())

    def delete(self, session_id: str):
        if self.sessions.pop(session_id, None) is not None:
            logger.info("Deleted session %s", session_id)

    def generate_next_round(self, session_id: str, rng: Optional[random.Random] = None) -> List[Match]:
        session = self.get(session_id)
        # Nothing below the call mutates the session, so a refusal leaves it as it was
        plan = plan_round(
            session.players, session.matches, session.courts,
            rng=rng or self.rng, penalties=self.penalties,
        )
        _log_round(session, plan)

        session.matches = [*session.matches, *plan.matches]
        for player, stats in zip(session.players, compute_stats(session.players, session.matches)):
            player.games_played = stats.games_played
        session.current_round = plan.round_number
        logger.info("Session %s: generated round %d", session.id, plan.round_number)
        return plan.matches

    def current_round_matches(self, session_id: str) -> List[Match]:
        session = self.get(session_id)
        return [m for m in session.matches if m.round_number == session.current_round]

    def update_match_score(self, session_id: str, match_id: str, score: Score) -> Match:
        session = self.get(session_id)
        match = next((m for m in session.matches if m.match_id == match_id), None)
        if match is None:
            raise MatchNotFound(match_id)

        first, second = score
        if first < 0 or second < 0:
            raise InvalidScore("Scores must not be negative")
        if session.points_per_game and first + second != session.points_per_game:
            raise InvalidScore(f"Scores must add up to {session.points_per_game}")

        match.match_score = (first, second)
        logger.info("Session %s: match %s scored %d-%d", session.id, match_id, first, second)
        return match
