from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

def generate_id():
    import uuid
    return str(uuid.uuid4())[:8]

Pair = Tuple[str, str]
Score = Tuple[int, int]

@dataclass
class Player:
    name: str
    games_played: int = 0

@dataclass
class Match:
    match_id: str
    round_number: int
    first_team: Pair
    second_team: Pair
    match_score: Optional[Score] = None

    @property
    def players(self) -> List[str]:
        return [*self.first_team, *self.second_team]

    def side_of(self, name: str) -> Optional[Tuple[Pair, Pair]]:
        """Return (own team, opposing team) for `name`, or None if absent."""
        if name in self.first_team:
            return self.first_team, self.second_team
        if name in self.second_team:
            return self.second_team, self.first_team
        return None

@dataclass
class PlayerStats:
    player_name: str
    games_played: int = 0
    teammate_count: Dict[str, int] = field(default_factory=dict)
    opponent_count: Dict[str, int] = field(default_factory=dict)
    partners_played_with: Set[str] = field(default_factory=set)

@dataclass
class TeamCombination:
    first_team: Pair
    second_team: Pair
    combination_score: int = 0

@dataclass(frozen=True)
class PenaltyConfig:
    """Weights of the team split score. Tuning knobs, not derived values."""
    high_teammate_repeat: int = 20   # partner coverage still incomplete
    low_teammate_repeat: int = 2     # coverage exhausted for one of the pair
    opponent_repeat: int = 1

# Decision traces returned alongside results so callers can log them

@dataclass
class Selection:
    players: List[str]               # [anchor, *shuffled others]
    anchor: str
    forced_partner: Optional[str] = None
    filled: List[str] = field(default_factory=list)

@dataclass
class SplitDecision:
    combination: TeamCombination
    candidates: List[TeamCombination] = field(default_factory=list)
    filtered_out: List[TeamCombination] = field(default_factory=list)
    fell_back: bool = False

@dataclass
class CourtDecision:
    court: int
    selection: Selection
    split: SplitDecision

@dataclass
class RoundPlan:
    round_number: int
    matches: List[Match] = field(default_factory=list)
    decisions: List[CourtDecision] = field(default_factory=list)

@dataclass
class AmericanoSession:
    id: str
    name: str
    courts: int
    points_per_game: int = 0
    players: List[Player] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)
    current_round: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
