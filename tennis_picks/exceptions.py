"""
Custom exceptions for the Tennis Picks scoring engine.
"""


class TennisPicksError(Exception):
    """Base exception for all custom errors."""
    pass


class ValidationError(TennisPicksError):
    """Raised when an input violates an engine invariant."""
    pass


class InvalidPairError(ValidationError):
    """Raised when both sides of a pair are the same competitor."""
    def __init__(self, competitor_id: int):
        self.competitor_id = competitor_id
        super().__init__(f"Cannot pair competitor {competitor_id} with itself")


class UnknownCompetitorError(ValidationError):
    """Raised when a competitor id is not one of the pair."""
    def __init__(self, competitor_id: int, low_id: int, high_id: int):
        self.competitor_id = competitor_id
        self.low_id = low_id
        self.high_id = high_id
        super().__init__(
            f"Competitor {competitor_id} is not part of pair ({low_id}, {high_id})"
        )


class ConflictError(TennisPicksError):
    """Raised when an operation conflicts with the current state of a record."""
    pass


class BracketLockedError(ConflictError):
    """Raised when a frozen bracket receives a structural edit."""
    def __init__(self, bracket_id: str, status: str):
        self.bracket_id = bracket_id
        self.status = status
        super().__init__(f"Bracket {bracket_id} is {status} and cannot be edited")


# Configuration Errors
class ConfigurationError(TennisPicksError):
    """Raised when configuration is invalid or missing."""
    pass
