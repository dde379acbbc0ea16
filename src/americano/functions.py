import random
from typing import Dict, Iterable, List, Optional

from americano.exceptions import (
    InsufficientAvailablePlayers, InsufficientPlayers,
    InsufficientRoster, InvalidSelectionSize,
)
from americano.models import (
    CourtDecision, Match, Pair, PenaltyConfig, Player, PlayerStats,
    RoundPlan, Selection, SplitDecision, TeamCombination, generate_id,
)

# Input positions of the 3 ways to split 4 players into two teams of 2
PAIRINGS = ((0, 1, 2, 3), (0, 2, 1, 3), (0, 3, 1, 2))


# -- Participation ledger ------------------------------------------------------

def compute_stats(roster: List[Player], history: Iterable[Match]) -> List[PlayerStats]:
    """Fold the match history into per-player counts, one entry per roster player."""
    history = list(history)
    stats = []
    for player in roster:
        s = PlayerStats(player_name=player.name)
        for match in history:
            sides = match.side_of(player.name)
            if sides is None:
                continue
            own, opposing = sides
            s.games_played += 1
            for teammate in own:
                if teammate != player.name:
                    s.teammate_count[teammate] = s.teammate_count.get(teammate, 0) + 1
                    s.partners_played_with.add(teammate)
            for opponent in opposing:
                s.opponent_count[opponent] = s.opponent_count.get(opponent, 0) + 1
        stats.append(s)
    return stats


# -- Candidate selector --------------------------------------------------------

def select_four(available: List[PlayerStats], rng: Optional[random.Random] = None) -> Selection:
    """
    Pick 4 players for the next court: the least-played anchor, a partner the
    anchor has never played with, then the least-played of the rest.
    """
    if len(available) < 4:
        raise InsufficientPlayers(len(available))
    rng = rng or random.Random()

    # Shuffle first so ties on games played are broken by the rng
    pool = list(available)
    rng.shuffle(pool)
    anchor = min(pool, key=lambda s: s.games_played)
    rest = sorted(
        (s for s in pool if s.player_name != anchor.player_name),
        key=lambda s: s.games_played,
    )

    # A fresh partner may not have played more than whoever takes the last seat
    ceiling = rest[2].games_played
    unplayed = [
        s for s in rest
        if s.player_name not in anchor.partners_played_with and s.games_played <= ceiling
    ]
    forced = unplayed[0].player_name if unplayed else None

    others = [forced] if forced else []
    filled = [s.player_name for s in rest if s.player_name != forced][:3 - len(others)]
    others += filled
    rng.shuffle(others)

    return Selection(
        players=[anchor.player_name, *others],
        anchor=anchor.player_name,
        forced_partner=forced,
        filled=filled,
    )


# -- Team split optimizer ------------------------------------------------------

def _coverage_open(pair: Pair, stats_by_name: Dict[str, PlayerStats], max_partners: int) -> bool:
    return all(len(stats_by_name[name].partners_played_with) < max_partners for name in pair)


def _partner_repeats(pair: Pair, stats_by_name: Dict[str, PlayerStats]) -> int:
    first, second = pair
    return stats_by_name[first].teammate_count.get(second, 0)


def _is_avoidable_repeat(pair: Pair, stats_by_name: Dict[str, PlayerStats], max_partners: int) -> bool:
    return (
        _partner_repeats(pair, stats_by_name) > 0
        and _coverage_open(pair, stats_by_name, max_partners)
    )


def combination_score(
    combination: TeamCombination,
    stats_by_name: Dict[str, PlayerStats],
    max_partners: int,
    penalties: PenaltyConfig,
) -> int:
    """Higher (less negative) is better: fewer games, fresher partners and opponents."""
    score = -sum(
        stats_by_name[name].games_played
        for name in (*combination.first_team, *combination.second_team)
    )

    for pair in (combination.first_team, combination.second_team):
        weight = (
            penalties.high_teammate_repeat
            if _coverage_open(pair, stats_by_name, max_partners)
            else penalties.low_teammate_repeat
        )
        score -= weight * _partner_repeats(pair, stats_by_name)

    for first in combination.first_team:
        for second in combination.second_team:
            score -= penalties.opponent_repeat * stats_by_name[first].opponent_count.get(second, 0)
    return score


def best_split(
    players: List[str],
    stats: List[PlayerStats],
    rng: Optional[random.Random] = None,
    penalties: Optional[PenaltyConfig] = None,
) -> SplitDecision:
    """
    Choose how to split 4 players into two teams.

    `stats` is the ledger of the whole roster; its size sets how many distinct
    partners a player can have. Splits that repeat a partnership while both
    partners still have fresh partners left are excluded, unless that would
    exclude every split. The best scoring survivor wins, ties drawn by `rng`.
    """
    if len(players) != 4 or len(set(players)) != 4:
        raise InvalidSelectionSize(players)
    rng = rng or random.Random()
    penalties = penalties or PenaltyConfig()

    stats_by_name = {s.player_name: s for s in stats}
    for name in players:
        stats_by_name.setdefault(name, PlayerStats(player_name=name))
    max_partners = len(stats) - 1

    combinations = [
        TeamCombination(
            first_team=(players[a], players[b]),
            second_team=(players[c], players[d]),
        )
        for a, b, c, d in PAIRINGS
    ]
    kept, filtered_out = [], []
    for combo in combinations:
        if (_is_avoidable_repeat(combo.first_team, stats_by_name, max_partners)
                or _is_avoidable_repeat(combo.second_team, stats_by_name, max_partners)):
            filtered_out.append(combo)
        else:
            kept.append(combo)

    candidates = kept or combinations
    for combo in candidates:
        combo.combination_score = combination_score(combo, stats_by_name, max_partners, penalties)

    best = max(c.combination_score for c in candidates)
    best_combinations = [c for c in candidates if c.combination_score == best]

    return SplitDecision(
        combination=rng.choice(best_combinations),
        candidates=candidates,
        filtered_out=filtered_out,
        fell_back=not kept,
    )


# -- Round generator -----------------------------------------------------------

def next_round_number(history: Iterable[Match]) -> int:
    return max((m.round_number for m in history), default=0) + 1


def _fresh_id(taken: set) -> str:
    match_id = generate_id()
    while match_id in taken:
        match_id = generate_id()
    return match_id


def plan_round(
    roster: List[Player],
    history: List[Match],
    number_of_courts: int,
    rng: Optional[random.Random] = None,
    penalties: Optional[PenaltyConfig] = None,
) -> RoundPlan:
    """Generate one round, one match per court, with the decision behind each court."""
    if number_of_courts < 1:
        raise ValueError("number_of_courts must be at least 1")
    if len(roster) < number_of_courts * 4:
        raise InsufficientRoster(len(roster), number_of_courts)
    rng = rng or random.Random()

    plan = RoundPlan(round_number=next_round_number(history))
    used = set()
    taken_ids = {m.match_id for m in history}

    for court in range(number_of_courts):
        # Later courts see the matches already placed this round
        stats = compute_stats(roster, [*history, *plan.matches])
        available = [s for s in stats if s.player_name not in used]
        if len(available) < 4:
            raise InsufficientAvailablePlayers(court, len(available))

        selection = select_four(available, rng)
        split = best_split(selection.players, stats, rng, penalties)
        combo = split.combination
        used.update(combo.first_team)
        used.update(combo.second_team)

        match = Match(
            match_id=_fresh_id(taken_ids),
            round_number=plan.round_number,
            first_team=combo.first_team,
            second_team=combo.second_team,
        )
        taken_ids.add(match.match_id)
        plan.matches.append(match)
        plan.decisions.append(CourtDecision(court=court, selection=selection, split=split))

    return plan


def generate_round(
    roster: List[Player],
    history: List[Match],
    number_of_courts: int,
    rng: Optional[random.Random] = None,
    penalties: Optional[PenaltyConfig] = None,
) -> List[Match]:
    return plan_round(roster, history, number_of_courts, rng, penalties).matches


def generate_fair_match(
    roster: List[Player],
    history: List[Match],
    rng: Optional[random.Random] = None,
    penalties: Optional[PenaltyConfig] = None,
) -> Match:
    """Single match variant, kept for older callers. Same as a one-court round."""
    return generate_round(roster, history, 1, rng, penalties)[0]
