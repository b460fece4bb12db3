from rest_framework import serializers

from apps.accounts.tiers import PAID_TIERS


class TierPriceSerializer(serializers.Serializer):
    minutes = serializers.IntegerField(min_value=1)
    price_cents = serializers.IntegerField(min_value=0)


class PricingSerializer(serializers.Serializer):
    tiers = serializers.DictField(child=TierPriceSerializer(), required=False)
    extension_cents = serializers.IntegerField(min_value=0, required=False)
    second_date_cents = serializers.IntegerField(min_value=0, required=False)

    def validate_tiers(self, value):
        unknown = set(value) - {str(tier) for tier in PAID_TIERS}
        if unknown:
            raise serializers.ValidationError(
                f"Unknown paid tier(s): {', '.join(sorted(unknown))}"
            )
        return value


class AdminSettingsSerializer(serializers.Serializer):
    """Body of PUT /api/admin/settings/; every key is optional."""

    pricing = PricingSerializer(required=False)
    discount_toggles = serializers.DictField(child=serializers.BooleanField(), required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Provide at least one setting to update')
        return attrs
