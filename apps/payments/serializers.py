from rest_framework import serializers


class CheckoutSerializer(serializers.Serializer):
    # kind and tier are validated against pricing in the service
    kind = serializers.CharField(required=False, allow_blank=True, default='')
    tier = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    cents = serializers.IntegerField(required=False, allow_null=True, default=None)
    redirectURL = serializers.URLField(required=False, allow_blank=True, default='')


class DowngradeSerializer(serializers.Serializer):
    tier = serializers.CharField(required=False, allow_blank=True, default='')


class PortalSerializer(serializers.Serializer):
    redirectURL = serializers.URLField(required=False, allow_blank=True, default='')
