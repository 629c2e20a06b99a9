"""Domain errors raised by the services and translated by the routers."""


class FantasyLeagueError(Exception):
    """Base exception for every fantasy league error."""


class LeaderboardWriteError(FantasyLeagueError):
    """A leaderboard chunk failed to commit; earlier chunks stay written."""

    def __init__(self, chunk_index: int, written: int, cause: Exception) -> None:
        self.chunk_index = chunk_index
        self.written = written
        self.cause = cause
        super().__init__(
            f"Leaderboard chunk {chunk_index} failed after {written} entries written: {cause}"
        )


class ScoringSettingsError(FantasyLeagueError):
    """Base class for scoring profile management errors."""


class ActiveProfileError(ScoringSettingsError):
    """Raised when trying to delete the active scoring profile."""


class ProfileNotFoundError(ScoringSettingsError):
    """Raised when a scoring profile id does not exist."""


class PicksError(FantasyLeagueError):
    """Base class for pick submission errors."""


class PicksLockedError(PicksError):
    """The event is locked or already has an official result."""


class UnknownEventError(PicksError):
    """The event id is not on the calendar."""


class UsageLimitError(PicksError):
    """The selection would exceed a season usage limit."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"Usage limit exceeded for: {', '.join(violations)}")


class InvalidPenaltyError(FantasyLeagueError):
    """Penalty fractions must lie in [0, 1]."""
