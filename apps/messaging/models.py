from django.conf import settings
from django.db import models
import uuid


class Message(models.Model):
    """Text message exchanged inside a match."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    match = models.ForeignKey(
        'matches.Match',
        on_delete=models.CASCADE,
        related_name='messages'
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='messages_sent'
    )
    body = models.CharField(max_length=280)
    used_credit = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'messages'
        indexes = [
            models.Index(fields=['match', 'created_at'], name='messages_match_created_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.sender} in {self.match_id}: {self.body[:30]}"


class DailyMessageCount(models.Model):
    """Messages a member sent across all matches on one day."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='daily_message_counts'
    )
    date = models.DateField()
    messages_sent = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'message_daily_counts'
        constraints = [
            models.UniqueConstraint(fields=['user', 'date'], name='unique_daily_message_count'),
        ]


class MatchDailyMessageCount(models.Model):
    """Messages a member sent inside one match on one day."""

    match = models.ForeignKey(
        'matches.Match',
        on_delete=models.CASCADE,
        related_name='daily_message_counts'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='match_daily_message_counts'
    )
    date = models.DateField()
    messages_sent = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'match_daily_message_counts'
        constraints = [
            models.UniqueConstraint(fields=['match', 'user', 'date'], name='unique_match_daily_count'),
        ]


class MessageCredits(models.Model):
    """Purchased message credits; one row per member."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='message_credits'
    )
    credits_remaining = models.PositiveIntegerField(default=0)
    total_purchased = models.PositiveIntegerField(default=0)
    total_spent = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_message_credits'
        verbose_name_plural = 'message credits'

    def __str__(self):
        return f"{self.user}: {self.credits_remaining} credits"


class CreditPack(models.TextChoices):
    SMALL = 'PACK_SMALL', 'Small pack'
    MEDIUM = 'PACK_MEDIUM', 'Medium pack'
    LARGE = 'PACK_LARGE', 'Large pack'


class PricingTier(models.TextChoices):
    STANDARD = 'STANDARD', 'Standard'
    REWARD = 'REWARD', 'Reward'


class PurchaseStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'


class MessageCreditPurchase(models.Model):
    """
    Checkout session for a credit pack.

    ``status`` moves from pending to completed exactly once; the webhook
    credits the member only on that transition.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='credit_purchases'
    )
    pack = models.CharField(max_length=20, choices=CreditPack.choices)
    credits = models.PositiveIntegerField()
    amount_cents = models.PositiveIntegerField()
    pricing_tier = models.CharField(
        max_length=10,
        choices=PricingTier.choices,
        default=PricingTier.STANDARD
    )
    stripe_session_id = models.CharField(max_length=255, unique=True)
    status = models.CharField(
        max_length=20,
        choices=PurchaseStatus.choices,
        default=PurchaseStatus.PENDING
    )
    credited_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'message_credit_purchases'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user} {self.pack} ({self.status})"
