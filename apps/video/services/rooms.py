"""Video room creation."""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.tiers import MembershipTier, get_tier_limits, session_duration_minutes
from apps.matches.services import get_match_for_participant
from apps.video.models import VideoSession, VideoSessionStatus

from .daily_client import DailyClient
from .exceptions import DailyMeetingLimitError, VideoProviderError, VideoTrialExpiredError

logger = logging.getLogger(__name__)

FREE_TRIAL_DAYS = 14


@dataclass
class RoomResult:
    video_session: VideoSession
    room_name: str
    room_url: str
    max_duration_minutes: int


def _start_of_today() -> datetime:
    return timezone.make_aware(datetime.combine(timezone.localdate(), time.min))


def meetings_today(*, user: User) -> int:
    """Calls the member completed since midnight."""
    return VideoSession.objects.filter(
        Q(caller=user) | Q(callee=user),
        status=VideoSessionStatus.ENDED,
        ended_at__gte=_start_of_today(),
    ).count()


def check_video_access(*, user: User, now: Optional[datetime] = None) -> None:
    """
    Enforce the free tier's video rules. Paid tiers are not limited.

    Raises:
        VideoTrialExpiredError: 14 days after the member's first call
        DailyMeetingLimitError: Once today's meetings are used
    """
    if user.tier != MembershipTier.FREE:
        return

    now = now or timezone.now()
    if user.first_video_call_at and now > user.first_video_call_at + timedelta(days=FREE_TRIAL_DAYS):
        raise VideoTrialExpiredError(
            "Your 2-week free video trial has expired. Upgrade to continue video dating!"
        )

    max_meetings = get_tier_limits(user.tier).daily_meetings
    current = meetings_today(user=user)
    if max_meetings is not None and current >= max_meetings:
        raise DailyMeetingLimitError(
            f"Free tier allows {max_meetings} video meetings per day. Upgrade for unlimited calls!",
            current_meetings=current,
            max_meetings=max_meetings,
            next_available_at=_start_of_today() + timedelta(days=1),
        )


def create_room(*, match_id: UUID, user: User, client: Optional[DailyClient] = None) -> RoomResult:
    """
    Open a Daily.co room for a match.

    The session row is stored first so a failed room still leaves a trace;
    it is marked failed if Daily.co rejects the request.

    Raises:
        MatchNotFoundError: If the match does not exist
        NotMatchParticipantError: If the member is not in the match
        VideoTrialExpiredError: If a free member's trial is over
        DailyMeetingLimitError: If a free member used today's meetings
        VideoProviderError: If Daily.co fails
    """
    client = client or DailyClient()
    match = get_match_for_participant(match_id=match_id, user=user)
    check_video_access(user=user)

    other = match.other_participant(user)
    max_minutes = session_duration_minutes(user.tier, other.tier)

    video_session = VideoSession.objects.create(
        match=match,
        caller=user,
        callee=other,
        max_duration_minutes=max_minutes,
    )

    name = f'rv-{match.id}-{int(timezone.now().timestamp() * 1000)}'
    try:
        room = client.create_room(name, expires_in=settings.DAILY_ROOM_TTL_SECONDS)
    except VideoProviderError:
        video_session.status = VideoSessionStatus.FAILED
        video_session.save(update_fields=['status'])
        raise

    video_session.room_name = room.name
    video_session.room_url = room.url
    video_session.save(update_fields=['room_name', 'room_url'])

    logger.info(
        "Video room created",
        extra={
            'user_id': str(user.id),
            'match_id': str(match.id),
            'video_session_id': str(video_session.id),
        }
    )

    return RoomResult(
        video_session=video_session,
        room_name=room.name,
        room_url=room.url,
        max_duration_minutes=max_minutes,
    )
