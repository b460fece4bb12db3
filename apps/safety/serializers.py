from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from .models import Block, SafetyReport, ReportStatus


class BlockSerializer(serializers.ModelSerializer):
    """A block as shown in the member's block list."""

    blocked = UserPublicSerializer(read_only=True)

    class Meta:
        model = Block
        fields = ['id', 'blocked', 'reason', 'notes', 'created_at']
        read_only_fields = fields


class BlockCreateSerializer(serializers.Serializer):
    blockedId = serializers.UUIDField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class BlockNotesSerializer(serializers.Serializer):
    blockedId = serializers.UUIDField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')


class BlockDeleteSerializer(serializers.Serializer):
    blockedId = serializers.UUIDField()


class SafetyReportCreateSerializer(serializers.Serializer):
    reportedUserId = serializers.UUIDField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    videoSessionId = serializers.UUIDField(required=False, allow_null=True)
    context = serializers.CharField(max_length=50, required=False, default='video_call')


class SafetyReportSerializer(serializers.ModelSerializer):
    """Full report for the admin review queue."""

    reporter = UserPublicSerializer(read_only=True)
    reported_user = UserPublicSerializer(read_only=True)
    reported_block_count = serializers.IntegerField(source='reported_user.block_count', read_only=True)

    class Meta:
        model = SafetyReport
        fields = [
            'id',
            'reporter',
            'reported_user',
            'reported_block_count',
            'video_session',
            'reason',
            'context',
            'status',
            'admin_notes',
            'reviewed_at',
            'created_at',
        ]
        read_only_fields = fields


class SafetyReportReviewSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['resolve', 'ban'])
    adminNotes = serializers.CharField(required=False, allow_blank=True, default='')


class ReportStatusQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReportStatus.choices, default=ReportStatus.PENDING)


class FlaggedUserSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    display_name = serializers.CharField()
    email = serializers.EmailField()
    block_count = serializers.IntegerField()
    account_status = serializers.CharField()
    flagged_for_admin = serializers.BooleanField()
    membership_tier = serializers.CharField()
    created_at = serializers.DateTimeField()


class ClearFlagSerializer(serializers.Serializer):
    userId = serializers.UUIDField()
