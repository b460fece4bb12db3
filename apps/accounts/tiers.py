"""
Membership tier table.

Single source of truth for every limit a tier gates: media uploads, chat
minutes, daily video meetings and daily messages. Anything that compares
tiers should go through ``tier_rank`` rather than string comparison.
"""

from dataclasses import dataclass
from typing import Optional

from django.db import models


class MembershipTier(models.TextChoices):
    FREE = 'free', 'Free'
    CASUAL = 'casual', 'Casual'
    DATING = 'dating', 'Dating'
    BUSINESS = 'business', 'Business'


@dataclass(frozen=True)
class TierLimits:
    name: str
    rank: int
    photos: int
    videos: int
    video_max_seconds: int
    chat_minutes: int
    # None means unlimited
    daily_meetings: Optional[int]
    daily_messages: int
    price_cents: int
    description: str


TIERS = {
    MembershipTier.FREE: TierLimits(
        name='Free',
        rank=0,
        photos=2,
        videos=1,
        video_max_seconds=15,
        chat_minutes=5,
        daily_meetings=3,
        daily_messages=15,
        price_cents=0,
        description='Try video-first dating with short calls.',
    ),
    MembershipTier.CASUAL: TierLimits(
        name='Casual',
        rank=1,
        photos=6,
        videos=3,
        video_max_seconds=30,
        chat_minutes=15,
        daily_meetings=None,
        daily_messages=24,
        price_cents=999,
        description='More photos, longer calls and unlimited meetings.',
    ),
    MembershipTier.DATING: TierLimits(
        name='Dating',
        rank=2,
        photos=10,
        videos=1,
        video_max_seconds=60,
        chat_minutes=25,
        daily_meetings=None,
        daily_messages=50,
        price_cents=2999,
        description='For people who are serious about meeting someone.',
    ),
    MembershipTier.BUSINESS: TierLimits(
        name='Business',
        rank=3,
        photos=20,
        videos=1,
        video_max_seconds=300,
        chat_minutes=45,
        daily_meetings=None,
        daily_messages=500,
        price_cents=4999,
        description='Maximum reach with the longest calls.',
    ),
}

PAID_TIERS = (MembershipTier.CASUAL, MembershipTier.DATING, MembershipTier.BUSINESS)

# Business members get a per-match daily cap, raised once they have met on video
BUSINESS_PER_MATCH_MESSAGES = 50
BUSINESS_PER_MATCH_MESSAGES_AFTER_VIDEO = 75

EXTENSION_MINUTES = 10
EXTENSION_PRICE_CENTS = 800
SECOND_DATE_PRICE_CENTS = 1000


def normalize_tier(tier) -> str:
    """Map any stored tier value to a known tier, falling back to free."""
    value = (tier or '').strip().lower()
    if value in MembershipTier.values:
        return value
    return MembershipTier.FREE


def is_valid_tier(tier) -> bool:
    return tier in MembershipTier.values


def is_paid_tier(tier) -> bool:
    return tier in PAID_TIERS


def get_tier_limits(tier) -> TierLimits:
    return TIERS[normalize_tier(tier)]


def tier_rank(tier) -> int:
    return get_tier_limits(tier).rank


def session_duration_minutes(tier_a, tier_b) -> int:
    """A call lasts as long as the shorter of the two members' allowances."""
    return min(get_tier_limits(tier_a).chat_minutes, get_tier_limits(tier_b).chat_minutes)


def per_match_message_limit(tier, *, has_video_call: bool) -> Optional[int]:
    """Per-match daily cap imposed by the tier itself (business only)."""
    if normalize_tier(tier) != MembershipTier.BUSINESS:
        return None
    if has_video_call:
        return BUSINESS_PER_MATCH_MESSAGES_AFTER_VIDEO
    return BUSINESS_PER_MATCH_MESSAGES


def serialize_tier(tier) -> dict:
    limits = get_tier_limits(tier)
    return {
        'tier': normalize_tier(tier),
        'name': limits.name,
        'rank': limits.rank,
        'photos': limits.photos,
        'videos': limits.videos,
        'videoMaxSeconds': limits.video_max_seconds,
        'chatMinutes': limits.chat_minutes,
        'dailyMeetings': limits.daily_meetings,
        'dailyMessages': limits.daily_messages,
        'priceCents': limits.price_cents,
        'description': limits.description,
    }
