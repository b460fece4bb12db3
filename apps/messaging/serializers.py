from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from .models import Message, CreditPack


class MessageSerializer(serializers.ModelSerializer):
    sender = UserPublicSerializer(read_only=True)

    class Meta:
        model = Message
        fields = ['id', 'match', 'sender', 'body', 'used_credit', 'created_at']
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    # Length and content rules live in the sending service
    body = serializers.CharField(allow_blank=True, trim_whitespace=False)


class QuotaQuerySerializer(serializers.Serializer):
    matchId = serializers.UUIDField()


class CreditPurchaseSerializer(serializers.Serializer):
    pack = serializers.ChoiceField(choices=CreditPack.choices)
    redirectURL = serializers.URLField(required=False)
