from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from .models import VideoSession, VideoSessionExtension


class RoomCreateSerializer(serializers.Serializer):
    matchId = serializers.UUIDField()


class CallCompleteSerializer(serializers.Serializer):
    videoSessionId = serializers.UUIDField()
    durationSeconds = serializers.IntegerField(min_value=0, required=False, default=0)


class ExtensionResponseSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['accept', 'decline'])
    redirectURL = serializers.URLField(required=False)


class VideoSessionExtensionSerializer(serializers.ModelSerializer):

    class Meta:
        model = VideoSessionExtension
        fields = [
            'id',
            'initiator',
            'responder',
            'status',
            'amount_cents',
            'extension_seconds',
            'expires_at',
            'created_at',
        ]
        read_only_fields = fields


class PendingExtensionSerializer(VideoSessionExtensionSerializer):
    """An open request, flagged for the member looking at it."""

    is_initiator = serializers.SerializerMethodField()
    is_responder = serializers.SerializerMethodField()

    class Meta(VideoSessionExtensionSerializer.Meta):
        fields = VideoSessionExtensionSerializer.Meta.fields + ['is_initiator', 'is_responder']
        read_only_fields = fields

    def get_is_initiator(self, obj):
        return obj.initiator_id == self.context['request'].user.id

    def get_is_responder(self, obj):
        return obj.responder_id == self.context['request'].user.id


class VideoSessionSerializer(serializers.ModelSerializer):
    """A call from the point of view of the requesting member."""

    other_user = serializers.SerializerMethodField()
    base_seconds = serializers.IntegerField(read_only=True)
    total_seconds = serializers.IntegerField(read_only=True)

    class Meta:
        model = VideoSession
        fields = [
            'id',
            'match',
            'other_user',
            'status',
            'room_url',
            'max_duration_minutes',
            'duration_seconds',
            'base_seconds',
            'extended_seconds_total',
            'total_seconds',
            'started_at',
            'ended_at',
        ]
        read_only_fields = fields

    def get_other_user(self, obj):
        user = self.context['request'].user
        other = obj.callee if user.id == obj.caller_id else obj.caller
        return UserPublicSerializer(other).data
