"""Domain-specific exceptions for matches services."""


class MatchesServiceError(Exception):
    """Base exception for matches services."""
    pass


class CannotLikeSelfError(MatchesServiceError):
    """Raised when a member tries to like themselves."""
    pass


class UserNotFoundError(MatchesServiceError):
    """Raised when the liked member does not exist."""
    pass


class MatchNotFoundError(MatchesServiceError):
    """Raised when a match does not exist."""
    pass


class NotMatchParticipantError(MatchesServiceError):
    """Raised when the member is not one of the two matched users."""
    pass
