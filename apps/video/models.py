from django.conf import settings
from django.db import models
import uuid


class VideoSessionStatus(models.TextChoices):
    CREATED = 'created', 'Created'
    ENDED = 'ended', 'Ended'
    FAILED = 'failed', 'Failed'


class VideoSession(models.Model):
    """
    One video date between the two members of a match.

    A session is created together with its Daily.co room and ended when
    either member reports the call as complete.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    match = models.ForeignKey(
        'matches.Match',
        on_delete=models.CASCADE,
        related_name='video_sessions'
    )
    caller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='video_sessions_started'
    )
    callee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='video_sessions_received'
    )
    room_name = models.CharField(max_length=255, blank=True)
    room_url = models.URLField(max_length=500, blank=True)
    status = models.CharField(
        max_length=20,
        choices=VideoSessionStatus.choices,
        default=VideoSessionStatus.CREATED
    )
    max_duration_minutes = models.PositiveIntegerField(default=0)
    duration_seconds = models.PositiveIntegerField(default=0)
    extended_seconds_total = models.PositiveIntegerField(default=0)
    started_at = models.DateTimeField(auto_now_add=True)
    ended_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'video_sessions'
        indexes = [
            models.Index(fields=['match', 'started_at'], name='video_sessions_match_idx'),
            models.Index(fields=['status', 'ended_at'], name='video_sessions_ended_idx'),
        ]
        ordering = ['-started_at']

    def __str__(self):
        return f"{self.caller} -> {self.callee} ({self.status})"

    def has_participant(self, user) -> bool:
        return user.id in (self.caller_id, self.callee_id)

    def other_participant_id(self, user):
        return self.callee_id if user.id == self.caller_id else self.caller_id

    @property
    def base_seconds(self) -> int:
        return self.max_duration_minutes * 60

    @property
    def total_seconds(self) -> int:
        return self.base_seconds + self.extended_seconds_total


class ExtensionStatus(models.TextChoices):
    PENDING_ACCEPTANCE = 'pending_acceptance', 'Pending acceptance'
    AWAITING_PAYMENT = 'awaiting_payment', 'Awaiting payment'
    COMPLETED = 'completed', 'Completed'
    DECLINED = 'declined', 'Declined'
    EXPIRED = 'expired', 'Expired'
    PAYMENT_FAILED = 'payment_failed', 'Payment failed'


class VideoSessionExtension(models.Model):
    """
    A paid request to keep a running call going for longer.

    The initiator asks, the partner accepts or declines within a minute,
    and the initiator pays. Paid time is added to the session's
    ``extended_seconds_total``.
    """

    OPEN_STATUSES = (
        ExtensionStatus.PENDING_ACCEPTANCE,
        ExtensionStatus.AWAITING_PAYMENT,
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    video_session = models.ForeignKey(
        VideoSession,
        on_delete=models.CASCADE,
        related_name='extensions'
    )
    initiator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='+'
    )
    responder = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='+'
    )
    status = models.CharField(
        max_length=20,
        choices=ExtensionStatus.choices,
        default=ExtensionStatus.PENDING_ACCEPTANCE
    )
    amount_cents = models.PositiveIntegerField()
    extension_seconds = models.PositiveIntegerField()
    stripe_session_id = models.CharField(max_length=255, null=True, blank=True, unique=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'video_session_extensions'
        indexes = [
            models.Index(fields=['video_session', 'status'], name='video_ext_session_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.initiator} +{self.extension_seconds}s ({self.status})"


class MonthlyVideoCall(models.Model):
    """A member met a partner on video at least once in a calendar month."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='monthly_video_calls'
    )
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='+'
    )
    video_session = models.ForeignKey(
        VideoSession,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    month_year = models.CharField(max_length=7, help_text='YYYY-MM')
    completed_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'monthly_video_calls'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'partner', 'month_year'],
                name='unique_monthly_video_call'
            ),
        ]

    def __str__(self):
        return f"{self.user} / {self.partner} ({self.month_year})"


class RewardStatus(models.Model):
    """Cached monthly reward state; recomputed from MonthlyVideoCall."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='reward_status'
    )
    has_active_reward = models.BooleanField(default=False)
    current_month_calls = models.PositiveIntegerField(default=0)
    month_year = models.CharField(max_length=7)
    last_warning_shown_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_status'
        verbose_name_plural = 'reward statuses'

    def __str__(self):
        return f"{self.user}: {self.current_month_calls} calls in {self.month_year}"
