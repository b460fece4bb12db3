"""Services for likes and matches."""

from .exceptions import (
    MatchesServiceError,
    CannotLikeSelfError,
    UserNotFoundError,
    MatchNotFoundError,
    NotMatchParticipantError,
)
from .likes import LikeResult, like_user
from .match_access import get_match, get_match_for_participant, get_user_matches

__all__ = [
    # Exceptions
    'MatchesServiceError',
    'CannotLikeSelfError',
    'UserNotFoundError',
    'MatchNotFoundError',
    'NotMatchParticipantError',
    # Services
    'LikeResult',
    'like_user',
    'get_match',
    'get_match_for_participant',
    'get_user_matches',
]
