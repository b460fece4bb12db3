from django.db import models
import uuid


class WebhookEventStatus(models.TextChoices):
    PROCESSED = 'processed', 'Processed'
    FAILED = 'failed', 'Failed'
    SIGNATURE_MISSING = 'signature_missing', 'Signature missing'
    SIGNATURE_FAILED = 'signature_failed', 'Signature failed'


class WebhookEvent(models.Model):
    """
    Audit log of Stripe webhook deliveries.

    ``event_id`` is Stripe's event id, so a redelivered event that was
    already processed can be acknowledged without running it again.
    Rejected deliveries get a generated id since no event was parsed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=WebhookEventStatus.choices)
    error_message = models.TextField(blank=True)
    source_ip = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'webhook_events'
        indexes = [
            models.Index(fields=['event_type', 'created_at'], name='webhook_events_type_idx'),
            models.Index(fields=['status'], name='webhook_events_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.event_type or 'unknown'} {self.event_id} ({self.status})"
