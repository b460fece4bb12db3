"""
Database-backed sliding-window rate limiting.

Each accepted request stores a ``RateLimitEntry``. On every check, entries
that fell out of the window are pruned and the rest are counted, so the
limit is exact rather than bucketed.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from django.db import transaction
from django.db.models import Min
from django.utils import timezone

from apps.accounts.models import User
from apps.core.models import RateLimitEntry


@dataclass(frozen=True)
class RateLimitRule:
    endpoint: str
    max_requests: int
    window: timedelta
    label: str


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime
    message: str = ''

    @property
    def retry_after_seconds(self) -> int:
        seconds = (self.reset_at - timezone.now()).total_seconds()
        return max(0, int(seconds + 0.999))


class RateLimits:
    VIDEO_ROOM_CREATE = RateLimitRule(
        endpoint='video_room_create',
        max_requests=10,
        window=timedelta(minutes=60),
        label='video room',
    )
    BLOCKERS = RateLimitRule(
        endpoint='blockers',
        max_requests=20,
        window=timedelta(minutes=60),
        label='block',
    )
    LIKES = RateLimitRule(
        endpoint='likes',
        max_requests=100,
        window=timedelta(minutes=60),
        label='like',
    )


@transaction.atomic
def check_rate_limit(*, user_id: UUID, rule: RateLimitRule) -> RateLimitResult:
    """
    Record a request against ``rule`` and report whether it is allowed.

    The user row is locked so concurrent requests from one member are
    counted one at a time. Denied requests are not recorded.

    Args:
        user_id: Member making the request
        rule: Endpoint, limit and window to enforce

    Returns:
        RateLimitResult with remaining quota and reset time
    """
    # Serialize checks per member
    User.objects.select_for_update().filter(id=user_id).first()

    now = timezone.now()
    window_start = now - rule.window

    entries = RateLimitEntry.objects.filter(user_id=user_id, endpoint=rule.endpoint)
    entries.filter(created_at__lt=window_start).delete()

    count = entries.count()
    if count >= rule.max_requests:
        oldest = entries.aggregate(oldest=Min('created_at'))['oldest'] or now
        return RateLimitResult(
            allowed=False,
            limit=rule.max_requests,
            remaining=0,
            reset_at=oldest + rule.window,
            message=f"Too many {rule.label} requests. Please try again later.",
        )

    RateLimitEntry.objects.create(user_id=user_id, endpoint=rule.endpoint, created_at=now)

    return RateLimitResult(
        allowed=True,
        limit=rule.max_requests,
        remaining=rule.max_requests - count - 1,
        reset_at=now + rule.window,
    )
