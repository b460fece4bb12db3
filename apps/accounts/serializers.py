from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from .models import User
from .tiers import MembershipTier


class UserSerializer(serializers.ModelSerializer):
    """Profile of the signed-in member, including membership state."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'email_verified',
            'membership_tier',
            'scheduled_tier',
            'tier_change_at',
            'subscription_status',
            'account_status',
            'video_meetings_count',
            'created_at',
            'last_login',
        ]
        read_only_fields = [
            'id',
            'email',
            'email_verified',
            'membership_tier',
            'scheduled_tier',
            'tier_change_at',
            'subscription_status',
            'account_status',
            'video_meetings_count',
            'created_at',
            'last_login',
        ]


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class MagicLinkRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)


class MagicLinkVerifySerializer(serializers.Serializer):
    token = serializers.CharField(required=True)


class DeleteAccountSerializer(serializers.Serializer):
    password = serializers.CharField(required=True, help_text="Current password for confirmation")
    confirm = serializers.BooleanField(required=True, help_text="Must be true to confirm deletion")


class TierSerializer(serializers.Serializer):
    """Read-only description of a membership tier."""

    tier = serializers.ChoiceField(choices=MembershipTier.choices)
    name = serializers.CharField()
    rank = serializers.IntegerField()
    photos = serializers.IntegerField()
    videos = serializers.IntegerField()
    videoMaxSeconds = serializers.IntegerField()
    chatMinutes = serializers.IntegerField()
    dailyMeetings = serializers.IntegerField(allow_null=True)
    dailyMessages = serializers.IntegerField()
    priceCents = serializers.IntegerField()
    description = serializers.CharField()


class UserPublicSerializer(serializers.ModelSerializer):
    """Public member info (for matches, blocks and reports)."""

    class Meta:
        model = User
        fields = ['id', 'display_name', 'membership_tier']
        read_only_fields = fields
