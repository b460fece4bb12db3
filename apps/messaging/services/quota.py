"""
Daily message allowances.

Two allowances apply to every message:

* per match: 10 a day before the pair has met on video, 10 plus a tier
  bonus afterwards, and only 2 a day once a match has gone three days
  without a video call ("decay"). Business members are additionally
  capped per match by their tier.
* per member: the tier's daily message limit across all matches.

A message is free while both have room; otherwise it costs a credit.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.tiers import MembershipTier, get_tier_limits, per_match_message_limit
from apps.matches.models import Match
from apps.messaging.models import DailyMessageCount, MatchDailyMessageCount, MessageCredits

BASE_MATCH_MESSAGES = 10
DECAY_MATCH_MESSAGES = 2
DECAY_AFTER = timedelta(days=3)

POST_VIDEO_TIER_BONUS = {
    MembershipTier.FREE: 0,
    MembershipTier.CASUAL: 25,
    MembershipTier.DATING: 50,
    MembershipTier.BUSINESS: 100,
}

DECAY_LIMIT = 'decay_limit'
DAILY_LIMIT = 'daily_limit'
PRE_VIDEO_LIMIT = 'pre_video_limit'
TIER_DAILY_LIMIT = 'tier_daily_limit'

QUOTA_MESSAGES = {
    DECAY_LIMIT: (
        "You've reached the 2 messages/day limit with this person. "
        "Schedule a video call to unlock more messages!"
    ),
    DAILY_LIMIT: (
        "Daily message limit reached with this person. "
        "Purchase credits or wait until tomorrow!"
    ),
    PRE_VIDEO_LIMIT: (
        "You've sent 10 messages to this person today. "
        "Complete a video call to unlock more messages!"
    ),
    TIER_DAILY_LIMIT: (
        "You've used all of today's messages for your membership tier. "
        "Purchase credits or upgrade to keep chatting!"
    ),
}


@dataclass
class MatchAllowance:
    limit: int
    used: int
    is_decay: bool
    has_completed_video: bool

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @property
    def exhausted_reason(self) -> str:
        if self.is_decay:
            return DECAY_LIMIT
        if self.has_completed_video:
            return DAILY_LIMIT
        return PRE_VIDEO_LIMIT


@dataclass
class TierAllowance:
    limit: int
    used: int
    resets_at: datetime

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)


def today() -> date:
    return timezone.localdate()


def next_midnight() -> datetime:
    tomorrow = today() + timedelta(days=1)
    return timezone.make_aware(datetime.combine(tomorrow, time.min))


def match_message_limit(*, match: Match, tier: str, now: Optional[datetime] = None) -> tuple:
    """
    Return ``(limit, is_decay)`` for one member in one match.
    """
    now = now or timezone.now()
    has_video = match.has_video_call
    is_decay = not has_video and (now - match.created_at) >= DECAY_AFTER

    if is_decay:
        limit = DECAY_MATCH_MESSAGES
    elif has_video:
        limit = BASE_MATCH_MESSAGES + POST_VIDEO_TIER_BONUS.get(tier, 0)
    else:
        limit = BASE_MATCH_MESSAGES

    tier_cap = per_match_message_limit(tier, has_video_call=has_video)
    if tier_cap is not None:
        limit = min(limit, tier_cap)

    return limit, is_decay


def get_match_allowance(*, match: Match, user: User, day: Optional[date] = None) -> MatchAllowance:
    day = day or today()
    limit, is_decay = match_message_limit(match=match, tier=user.tier)
    used = (
        MatchDailyMessageCount.objects
        .filter(match=match, user=user, date=day)
        .values_list('messages_sent', flat=True)
        .first()
    ) or 0
    return MatchAllowance(
        limit=limit,
        used=used,
        is_decay=is_decay,
        has_completed_video=match.has_video_call,
    )


def get_tier_allowance(*, user: User, day: Optional[date] = None) -> TierAllowance:
    day = day or today()
    used = (
        DailyMessageCount.objects
        .filter(user=user, date=day)
        .values_list('messages_sent', flat=True)
        .first()
    ) or 0
    return TierAllowance(
        limit=get_tier_limits(user.tier).daily_messages,
        used=used,
        resets_at=next_midnight(),
    )


def get_credit_balance(*, user: User) -> int:
    return (
        MessageCredits.objects
        .filter(user=user)
        .values_list('credits_remaining', flat=True)
        .first()
    ) or 0


def get_quota(*, match: Match, user: User) -> dict:
    """Everything the client needs to show the message composer state."""
    per_match = get_match_allowance(match=match, user=user)
    daily = get_tier_allowance(user=user)
    credits = get_credit_balance(user=user)

    free_message_available = per_match.remaining > 0 and daily.remaining > 0

    return {
        'canSend': free_message_available or credits > 0,
        'perMatch': {
            'limit': per_match.limit,
            'used': per_match.used,
            'remaining': per_match.remaining,
            'isDecay': per_match.is_decay,
            'hasCompletedVideo': per_match.has_completed_video,
            'resetsAt': daily.resets_at,
        },
        'dailyTier': {
            'limit': daily.limit,
            'used': daily.used,
            'remaining': daily.remaining,
            'resetsAt': daily.resets_at,
        },
        'credits': {
            'remaining': credits,
        },
        'tier': user.tier,
        'hasVideoCalledWith': per_match.has_completed_video,
    }
