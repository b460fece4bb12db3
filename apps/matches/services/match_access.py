"""Lookups that enforce match participation."""

from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.matches.models import Match
from apps.safety.services import blocked_user_ids

from .exceptions import MatchNotFoundError, NotMatchParticipantError


def get_match(*, match_id: UUID) -> Match:
    try:
        return Match.objects.select_related('user_a', 'user_b').get(id=match_id)
    except (Match.DoesNotExist, ValidationError, ValueError):
        raise MatchNotFoundError(f"Match {match_id} not found")


def get_match_for_participant(*, match_id: UUID, user: User) -> Match:
    """
    Fetch a match the member takes part in.

    Raises:
        MatchNotFoundError: If the match does not exist
        NotMatchParticipantError: If the member is not in the match
    """
    match = get_match(match_id=match_id)
    if not match.has_participant(user):
        raise NotMatchParticipantError("You are not part of this match")
    return match


def get_user_matches(*, user: User) -> QuerySet:
    """Matches for a member, excluding anyone blocked in either direction."""
    hidden = blocked_user_ids(user=user)
    return (
        Match.objects
        .filter(Q(user_a=user) | Q(user_b=user))
        .exclude(user_a_id__in=hidden)
        .exclude(user_b_id__in=hidden)
        .select_related('user_a', 'user_b')
    )
