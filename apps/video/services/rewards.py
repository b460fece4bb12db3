"""
Monthly video reward.

Meeting three different people on video within a calendar month unlocks
reward pricing on message credits for the rest of that month. The count
starts over on the 1st.
"""

import calendar
from datetime import datetime
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.video.models import MonthlyVideoCall, RewardStatus, VideoSession

REWARD_THRESHOLD = 3
WARNING_DAYS = 7


def current_month_year(now: Optional[datetime] = None) -> str:
    return (now or timezone.now()).strftime('%Y-%m')


def days_until_month_end(now: Optional[datetime] = None) -> int:
    today = timezone.localdate(now)
    last_day = calendar.monthrange(today.year, today.month)[1]
    return last_day - today.day


def count_monthly_partners(*, user: User, month_year: Optional[str] = None) -> int:
    """Distinct partners ``user`` met on video in the given month."""
    return (
        MonthlyVideoCall.objects
        .filter(user=user, month_year=month_year or current_month_year())
        .values('partner_id')
        .distinct()
        .count()
    )


def record_monthly_call(*, user: User, partner: User, video_session: Optional[VideoSession] = None) -> None:
    """Record the call for both members so each one's count includes the other."""
    month_year = current_month_year()
    for member, other in ((user, partner), (partner, user)):
        MonthlyVideoCall.objects.update_or_create(
            user=member,
            partner=other,
            month_year=month_year,
            defaults={'video_session': video_session},
        )


@transaction.atomic
def sync_reward_status(*, user: User) -> RewardStatus:
    """
    Bring the cached reward row in line with this month's calls.

    A row left over from a previous month is reset before counting.
    """
    month_year = current_month_year()
    reward, created = RewardStatus.objects.select_for_update().get_or_create(
        user=user,
        defaults={'month_year': month_year},
    )

    if reward.month_year != month_year:
        reward.month_year = month_year
        reward.has_active_reward = False
        reward.current_month_calls = 0

    calls = count_monthly_partners(user=user, month_year=month_year)
    reward.current_month_calls = calls
    reward.has_active_reward = calls >= REWARD_THRESHOLD
    reward.save()
    return reward


def get_reward_summary(*, user: User) -> dict:
    reward = sync_reward_status(user=user)
    calls = reward.current_month_calls
    remaining = max(0, REWARD_THRESHOLD - calls)
    days_left = days_until_month_end()
    show_warning = remaining > 0 and days_left <= WARNING_DAYS

    warning_message = None
    if show_warning:
        call_word = 'call' if remaining == 1 else 'calls'
        day_word = 'day' if days_left == 1 else 'days'
        warning_message = (
            f"Complete {remaining} more video {call_word} in the next {days_left} {day_word} "
            f"to keep your 50% message credit bonus!"
        )

    return {
        'hasActiveReward': reward.has_active_reward,
        'videoCallsThisMonth': calls,
        'requiredCalls': REWARD_THRESHOLD,
        'remainingCalls': remaining,
        'daysUntilMonthEnd': days_left,
        'showWarning': show_warning,
        'warningMessage': warning_message,
        'monthYear': reward.month_year,
    }
