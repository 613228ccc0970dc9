from rest_framework import serializers

from .policy import OrderSettingsPolicy, DEFAULT_PREP_TIME_BUFFER_MINUTES


class OrderSettingsSerializer(serializers.Serializer):
    """
    Serializer for the merchant's order acceptance settings.
    Reads from and builds OrderSettingsPolicy instances.
    """
    auto_accept_orders = serializers.BooleanField(default=False)
    prep_time_buffer_minutes = serializers.IntegerField(
        min_value=0, default=DEFAULT_PREP_TIME_BUFFER_MINUTES
    )
    max_orders_per_hour = serializers.IntegerField(
        min_value=1, allow_null=True, default=None
    )
    allow_scheduled_orders = serializers.BooleanField(default=True)
    cancellation_policy_text = serializers.CharField(
        allow_blank=True, required=False, trim_whitespace=True
    )

    def to_policy(self) -> OrderSettingsPolicy:
        """Build the policy from validated data, keeping defaults for omitted fields."""
        return OrderSettingsPolicy(**self.validated_data)

