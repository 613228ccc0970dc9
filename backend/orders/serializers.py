from rest_framework import serializers

from .models import OrderActor, OrderStatus, PaymentMethod
from .services import OrderStatusMachine


class CustomerSerializer(serializers.Serializer):
    name = serializers.CharField()
    phone = serializers.CharField(allow_null=True, required=False)


class OrderItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    special_instructions = serializers.CharField(allow_null=True, required=False)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)


class OrderTimelineEntrySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    timestamp = serializers.DateTimeField()
    message = serializers.CharField(allow_null=True)
    actor = serializers.ChoiceField(choices=OrderActor.choices)


class OrderSerializer(serializers.Serializer):
    """
    Read-only representation of an Order value object.
    Also reports the transitions currently available so clients can decide
    which status buttons to show.
    """
    id = serializers.UUIDField(read_only=True)
    order_number = serializers.CharField(read_only=True)
    status = serializers.ChoiceField(choices=OrderStatus.choices, read_only=True)
    status_display = serializers.SerializerMethodField()
    customer = CustomerSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, read_only=True)
    total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    estimated_ready_minutes = serializers.IntegerField(read_only=True, allow_null=True)
    special_notes = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True, allow_null=True)
    last_status_at = serializers.DateTimeField(read_only=True)
    timeline = OrderTimelineEntrySerializer(many=True, read_only=True)
    allowed_transitions = serializers.SerializerMethodField()

    def get_status_display(self, obj):
        return str(OrderStatus(obj.status).label)

    def get_allowed_transitions(self, obj):
        # Sorted for a stable response
        return sorted(OrderStatusMachine.allowed_transitions(obj.status))


class UpdateOrderStatusSerializer(serializers.Serializer):
    """
    Validates the requested status value only.
    Whether the move is allowed is decided by OrderStatusMachine.
    ``message`` goes on the order timeline; for a cancellation it is the reason.
    """
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    message = serializers.CharField(
        max_length=500, required=False, allow_blank=True, allow_null=True
    )
    actor = serializers.ChoiceField(choices=OrderActor.choices, required=False)


class ConfirmationEventSerializer(serializers.Serializer):
    kind = serializers.CharField()
    title = serializers.CharField()
    order_number = serializers.CharField()
    created_at = serializers.DateTimeField()


class IntakeCheckSerializer(serializers.Serializer):
    """Input for the order intake advisory"""
    base_item_prep_minutes = serializers.IntegerField(min_value=0)
    current_hour_order_count = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    at = serializers.DateTimeField(required=False, allow_null=True)


class IntakeDecisionSerializer(serializers.Serializer):
    """Serializer for intake decisions (used in responses)"""
    accepted = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    message = serializers.CharField()
    initial_status = serializers.CharField(allow_null=True)
    estimated_ready_minutes = serializers.IntegerField(allow_null=True)
    current_hour_order_count = serializers.IntegerField()
