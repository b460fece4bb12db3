from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
import uuid

from .tiers import MembershipTier, normalize_tier


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('email_verified', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class SubscriptionStatus(models.TextChoices):
    NONE = 'none', 'None'
    ACTIVE = 'active', 'Active'
    PAST_DUE = 'past_due', 'Past due'
    CANCELED = 'canceled', 'Canceled'


class AccountStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    UNDER_REVIEW = 'under_review', 'Under review'
    BANNED = 'banned', 'Banned'


class User(AbstractBaseUser, PermissionsMixin):
    """Member account with email login, membership tier and safety state."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    email_verified = models.BooleanField(default=False)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Membership
    membership_tier = models.CharField(
        max_length=20,
        choices=MembershipTier.choices,
        default=MembershipTier.FREE,
    )
    scheduled_tier = models.CharField(
        max_length=20,
        choices=MembershipTier.choices,
        null=True,
        blank=True,
        help_text='Tier that takes effect at the end of the current billing period',
    )
    tier_change_at = models.DateTimeField(null=True, blank=True)
    subscription_status = models.CharField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.NONE,
    )
    stripe_customer_id = models.CharField(max_length=255, null=True, blank=True)

    # Safety
    block_count = models.PositiveIntegerField(default=0)
    flagged_for_admin = models.BooleanField(default=False)
    account_status = models.CharField(
        max_length=20,
        choices=AccountStatus.choices,
        default=AccountStatus.ACTIVE,
    )

    # Video usage
    video_meetings_count = models.PositiveIntegerField(default=0)
    first_video_call_at = models.DateTimeField(null=True, blank=True)
    last_video_call_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    # GDPR compliance
    gdpr_deleted_at = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'auth_users'
        indexes = [
            models.Index(fields=['email'], name='auth_users_email_idx'),
            models.Index(fields=['created_at'], name='auth_users_created_idx'),
            models.Index(fields=['flagged_for_admin'], name='auth_users_flagged_idx'),
            models.Index(fields=['stripe_customer_id'], name='auth_users_stripe_idx'),
        ]

    def __str__(self):
        return self.email

    @property
    def tier(self):
        """Membership tier normalized to a known value."""
        return normalize_tier(self.membership_tier)

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]

    def anonymize(self):
        """GDPR-compliant anonymization."""
        self.email = f"deleted_{self.id}@anonymized.local"
        self.display_name = "Deleted User"
        self.is_active = False
        self.gdpr_deleted_at = timezone.now()
        self.stripe_customer_id = None
        self.scheduled_tier = None
        self.tier_change_at = None
        self.set_unusable_password()
        self.save()
