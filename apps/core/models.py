from django.conf import settings
from django.db import models
import uuid


class RateLimitEntry(models.Model):
    """One accepted request inside a per-user sliding window."""

    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='rate_limit_entries'
    )
    endpoint = models.CharField(max_length=100)
    created_at = models.DateTimeField(db_index=True)

    class Meta:
        db_table = 'rate_limit_entries'
        indexes = [
            models.Index(fields=['user', 'endpoint', 'created_at'], name='rate_limit_window_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.endpoint} @ {self.created_at:%Y-%m-%d %H:%M:%S}"


class IdempotencyKey(models.Model):
    """Stored response for a client-supplied Idempotency-Key header."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=255)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='idempotency_keys'
    )
    response_body = models.JSONField()
    status_code = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    class Meta:
        db_table = 'idempotency_keys'
        constraints = [
            models.UniqueConstraint(fields=['user', 'key'], name='unique_idempotency_key_per_user'),
        ]
        indexes = [
            models.Index(fields=['expires_at'], name='idempotency_expires_idx'),
        ]

    def __str__(self):
        return self.key


class AdminSettings(models.Model):
    """Key/value store for runtime-tunable settings (pricing, discounts)."""

    PRICING = 'pricing'
    DISCOUNT_TOGGLES = 'discount_toggles'

    KEY_CHOICES = [
        (PRICING, 'Pricing'),
        (DISCOUNT_TOGGLES, 'Discount toggles'),
    ]

    key = models.CharField(max_length=100, primary_key=True, choices=KEY_CHOICES)
    value = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    class Meta:
        db_table = 'admin_settings'
        verbose_name = 'admin setting'
        verbose_name_plural = 'admin settings'

    def __str__(self):
        return self.key
