class SchedulerError(Exception):
    """Base class for every refusal raised while scheduling matches."""


class InsufficientRoster(SchedulerError):
    def __init__(self, players: int, courts: int):
        self.players = players
        self.courts = courts
        super().__init__(
            f"Need at least {courts * 4} players to generate {courts} matches, got {players}"
        )


class InsufficientAvailablePlayers(SchedulerError):
    def __init__(self, court: int, available: int):
        self.court = court
        self.available = available
        super().__init__(
            f"Not enough available players for match {court + 1}: {available} left"
        )


class InsufficientPlayers(SchedulerError):
    def __init__(self, available: int):
        self.available = available
        super().__init__(f"Need at least 4 players to generate a match, got {available}")


class InvalidSelectionSize(SchedulerError):
    def __init__(self, names):
        self.names = list(names)
        super().__init__(f"Exactly 4 distinct players required, got {self.names}")


# Session store errors

class SessionError(Exception):
    pass


class SessionNotFound(SessionError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class MatchNotFound(SessionError):
    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Match {match_id} not found")


class InvalidSession(SessionError):
    pass


class InvalidScore(SessionError):
    pass
