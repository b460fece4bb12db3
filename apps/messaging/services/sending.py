"""Message sending and history."""

import logging
from dataclasses import dataclass
from uuid import UUID

from django.db import transaction
from django.db.models import F, QuerySet

from apps.accounts.models import User
from apps.matches.models import Match
from apps.matches.services import get_match_for_participant
from apps.messaging.models import (
    DailyMessageCount,
    MatchDailyMessageCount,
    Message,
    MessageCredits,
)
from apps.safety.services import is_blocked_between

from .content_filters import contains_external_contact
from .exceptions import ConversationBlockedError, InvalidMessageError, QuotaExceededError
from .quota import (
    QUOTA_MESSAGES,
    TIER_DAILY_LIMIT,
    get_match_allowance,
    get_tier_allowance,
    today,
)

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 280


@dataclass
class SendResult:
    message: Message
    used_credit: bool


def validate_message_body(body) -> str:
    """
    Return the trimmed body or raise InvalidMessageError.
    """
    text = (body or '').strip() if isinstance(body, str) else ''
    if not text:
        raise InvalidMessageError("Message cannot be empty")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise InvalidMessageError(f"Message must be {MAX_MESSAGE_LENGTH} characters or fewer")
    if contains_external_contact(text):
        raise InvalidMessageError(
            "For your safety, sharing phone numbers or email addresses is not allowed"
        )
    return text


def _ensure_not_blocked(match: Match, user: User) -> None:
    other = match.other_participant(user)
    if is_blocked_between(user_id=user.id, other_id=other.id):
        raise ConversationBlockedError("You can no longer message this member")


def _spend_credit(user: User) -> bool:
    """Take one credit if any are left. Returns False when the balance is empty."""
    updated = (
        MessageCredits.objects
        .filter(user=user, credits_remaining__gt=0)
        .update(
            credits_remaining=F('credits_remaining') - 1,
            total_spent=F('total_spent') + 1,
        )
    )
    return updated == 1


def _increment_counters(match: Match, user: User, day) -> None:
    daily, _ = DailyMessageCount.objects.get_or_create(user=user, date=day)
    DailyMessageCount.objects.filter(pk=daily.pk).update(messages_sent=F('messages_sent') + 1)

    per_match, _ = MatchDailyMessageCount.objects.get_or_create(match=match, user=user, date=day)
    MatchDailyMessageCount.objects.filter(pk=per_match.pk).update(messages_sent=F('messages_sent') + 1)


@transaction.atomic
def send_message(*, match_id: UUID, sender: User, body) -> SendResult:
    """
    Send a message inside a match.

    The message is free while both the per-match and the daily tier
    allowance have room. Otherwise a credit is spent; with no credits left
    the send is refused.

    Args:
        match_id: Match to send into
        sender: Member sending the message
        body: Raw message text

    Returns:
        SendResult with the stored message and whether a credit was used

    Raises:
        InvalidMessageError: If the body is empty, too long or shares contact info
        MatchNotFoundError: If the match does not exist
        NotMatchParticipantError: If the sender is not in the match
        ConversationBlockedError: If either member blocked the other
        QuotaExceededError: If allowances and credits are exhausted
    """
    text = validate_message_body(body)
    match = get_match_for_participant(match_id=match_id, user=sender)
    _ensure_not_blocked(match, sender)

    # Serialize sends per member so counters are read consistently
    User.objects.select_for_update().filter(id=sender.id).first()

    day = today()
    per_match = get_match_allowance(match=match, user=sender, day=day)
    daily = get_tier_allowance(user=sender, day=day)

    used_credit = False
    if per_match.remaining <= 0 or daily.remaining <= 0:
        if not _spend_credit(sender):
            reason = per_match.exhausted_reason if per_match.remaining <= 0 else TIER_DAILY_LIMIT
            logger.info(
                "Message quota exceeded",
                extra={'user_id': str(sender.id), 'match_id': str(match.id), 'reason': reason}
            )
            raise QuotaExceededError(
                QUOTA_MESSAGES[reason],
                reason=reason,
                allowance=per_match,
                tier=sender.tier,
            )
        used_credit = True

    message = Message.objects.create(match=match, sender=sender, body=text, used_credit=used_credit)
    _increment_counters(match, sender, day)

    if used_credit:
        logger.info(
            "Message credit spent",
            extra={'user_id': str(sender.id), 'match_id': str(match.id)}
        )

    return SendResult(message=message, used_credit=used_credit)


def get_conversation(*, match_id: UUID, user: User) -> QuerySet:
    """Messages in a match, oldest first. Participants only."""
    match = get_match_for_participant(match_id=match_id, user=user)
    return Message.objects.filter(match=match).select_related('sender')
