# orders/serializers/order_input.py

"""
Request payload serializers (shape validation + Swagger docs).
Business validation stays in orders.services.
"""

from decimal import Decimal

from rest_framework import serializers

from orders.models import Order, OrderItem, Payment


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class SplitPaymentInputSerializer(serializers.Serializer):
    """
    Split payment leg. amount must be a POSITIVE decimal (e.g. "1500.00").
    """

    method = serializers.ChoiceField(choices=Payment.Method.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))


class CreateOrderInputSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    channel = serializers.ChoiceField(
        choices=Order.Channel.choices, required=False, default=Order.Channel.POS
    )

    # Either one method paying the full total, or explicit split legs.
    payment_method = serializers.ChoiceField(
        choices=Payment.Method.choices, required=False, allow_null=True, default=None
    )
    payments = SplitPaymentInputSerializer(many=True, required=False)

    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="")
    delivery_address = serializers.CharField(required=False, allow_blank=True, default="")
    delivery_notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs.get("payments") and attrs.get("payment_method"):
            raise serializers.ValidationError(
                "Send either payment_method or payments, not both."
            )
        return attrs


class AddItemsInputSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class StatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class ItemStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderItem.Status.choices)
