from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from .models import Match


class LikeRequestSerializer(serializers.Serializer):
    userId = serializers.UUIDField()


class MatchSerializer(serializers.ModelSerializer):
    """A match from the point of view of the requesting member."""

    other_user = serializers.SerializerMethodField()
    has_video_call = serializers.BooleanField(read_only=True)

    class Meta:
        model = Match
        fields = [
            'id',
            'other_user',
            'created_at',
            'has_video_call',
            'first_video_call_at',
            'last_video_call_at',
            'video_call_count',
        ]
        read_only_fields = fields

    def get_other_user(self, obj):
        request = self.context.get('request')
        return UserPublicSerializer(obj.other_participant(request.user)).data
