"""Video call completion."""

import logging
from dataclasses import dataclass
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.accounts.models import User
from apps.matches.models import Match
from apps.video.models import RewardStatus, VideoSession, VideoSessionStatus

from .exceptions import VideoSessionNotCompletableError, VideoSessionNotFoundError
from .rewards import record_monthly_call, sync_reward_status

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    video_session: VideoSession
    already_completed: bool
    user_reward: RewardStatus
    partner_reward: RewardStatus


@transaction.atomic
def complete_call(*, video_session_id: UUID, user: User, duration_seconds: int = 0) -> CompletionResult:
    """
    Mark a call as finished and update every counter that depends on it.

    Updates the match's video stats, both members' meeting counters, the
    monthly call log in both directions and both members' reward status.
    Reporting the same session twice does not count it twice.

    Raises:
        VideoSessionNotFoundError: If the session is unknown or not the member's
        VideoSessionNotCompletableError: If the room was never created
    """
    try:
        video_session = (
            VideoSession.objects
            .select_for_update()
            .select_related('caller', 'callee')
            .get(id=video_session_id)
        )
    except (VideoSession.DoesNotExist, ValidationError, ValueError):
        raise VideoSessionNotFoundError("Video session not found")

    if not video_session.has_participant(user):
        raise VideoSessionNotFoundError("Video session not found")

    partner = video_session.callee if user.id == video_session.caller_id else video_session.caller

    if video_session.status == VideoSessionStatus.ENDED:
        return CompletionResult(
            video_session=video_session,
            already_completed=True,
            user_reward=sync_reward_status(user=user),
            partner_reward=sync_reward_status(user=partner),
        )

    if video_session.status != VideoSessionStatus.CREATED:
        raise VideoSessionNotCompletableError("Video session cannot be completed")

    now = timezone.now()
    video_session.status = VideoSessionStatus.ENDED
    video_session.ended_at = now
    video_session.duration_seconds = max(0, int(duration_seconds or 0))
    video_session.save(update_fields=['status', 'ended_at', 'duration_seconds'])

    Match.objects.filter(pk=video_session.match_id).update(
        first_video_call_at=Coalesce(F('first_video_call_at'), now),
        last_video_call_at=now,
        video_call_count=F('video_call_count') + 1,
    )

    User.objects.filter(pk__in=[video_session.caller_id, video_session.callee_id]).update(
        video_meetings_count=F('video_meetings_count') + 1,
        first_video_call_at=Coalesce(F('first_video_call_at'), now),
        last_video_call_at=now,
    )

    record_monthly_call(user=user, partner=partner, video_session=video_session)
    user_reward = sync_reward_status(user=user)
    partner_reward = sync_reward_status(user=partner)

    logger.info(
        "Video call completed",
        extra={
            'video_session_id': str(video_session.id),
            'match_id': str(video_session.match_id),
            'duration_seconds': video_session.duration_seconds,
        }
    )

    return CompletionResult(
        video_session=video_session,
        already_completed=False,
        user_reward=user_reward,
        partner_reward=partner_reward,
    )
