from django.conf import settings
from django.db import models
import uuid


class Block(models.Model):
    """A member hiding another member from themselves."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    blocker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blocks_made'
    )
    blocked = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blocks_received'
    )
    reason = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'blockers'
        constraints = [
            models.UniqueConstraint(fields=['blocker', 'blocked'], name='unique_block'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.blocker} blocked {self.blocked}"


class ReportStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    RESOLVED = 'resolved', 'Resolved'
    ACTIONED = 'actioned', 'Actioned'


class SafetyReport(models.Model):
    """Report filed against a member, reviewed by admins."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reports_filed'
    )
    reported_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reports_received'
    )
    video_session = models.ForeignKey(
        'video.VideoSession',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='safety_reports'
    )
    reason = models.CharField(max_length=255)
    context = models.CharField(max_length=50, default='video_call')
    status = models.CharField(
        max_length=20,
        choices=ReportStatus.choices,
        default=ReportStatus.PENDING
    )
    admin_notes = models.TextField(blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reports_reviewed'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'safety_reports'
        indexes = [
            models.Index(fields=['status', '-created_at'], name='safety_report_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Report on {self.reported_user} ({self.status})"
