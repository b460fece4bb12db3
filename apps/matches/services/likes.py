"""
Like service.

A like becomes a match when the other member has already liked back.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import User
from apps.matches.models import Like, Match

from .exceptions import CannotLikeSelfError, UserNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class LikeResult:
    like: Like
    created: bool
    match: Optional[Match] = None

    @property
    def matched(self) -> bool:
        return self.match is not None


@transaction.atomic
def like_user(*, liker: User, liked_id: UUID) -> LikeResult:
    """
    Record that ``liker`` likes ``liked_id``, creating a match if mutual.

    Repeating a like is a no-op; the existing like (and match, if any)
    is returned.

    Args:
        liker: Member sending the like
        liked_id: Member being liked

    Returns:
        LikeResult with the like, whether it was new, and the match if mutual

    Raises:
        CannotLikeSelfError: If liker and liked are the same member
        UserNotFoundError: If the liked member does not exist or is inactive
    """
    if str(liker.id) == str(liked_id):
        raise CannotLikeSelfError("You cannot like yourself")

    try:
        liked = User.objects.get(id=liked_id, is_active=True)
    except (User.DoesNotExist, ValidationError, ValueError):
        raise UserNotFoundError(f"User {liked_id} not found")

    like, created = Like.objects.get_or_create(liker=liker, liked=liked)

    match = None
    if Like.objects.filter(liker=liked, liked=liker).exists():
        user_a, user_b = Match.ordered_pair(liker, liked)
        match, match_created = Match.objects.get_or_create(user_a=user_a, user_b=user_b)
        if match_created:
            logger.info(
                'Match created',
                extra={'match_id': str(match.id), 'user_a': str(user_a.id), 'user_b': str(user_b.id)}
            )

    return LikeResult(like=like, created=created, match=match)
