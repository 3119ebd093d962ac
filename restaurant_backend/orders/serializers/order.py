# orders/serializers/order.py

from rest_framework import serializers

from orders.models import Order, OrderItem, Payment


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "method", "amount", "shift", "created_at"]
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    """
    Order line (read-only). product_name is denormalised for the kitchen screen.
    """

    product_name = serializers.CharField(source="product.name", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "quantity",
            "unit_price",
            "line_total",
            "notes",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Full order state, as returned by the API and pushed to kitchen displays.
    """

    items = OrderItemSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)
    server_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "sequence_key",
            "business_date",
            "channel",
            "status",
            "payment_status",
            "subtotal_amount",
            "total_amount",
            "customer_name",
            "customer_phone",
            "delivery_address",
            "delivery_notes",
            "server",
            "server_name",
            "shift",
            "items",
            "payments",
            "closed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_server_name(self, obj):
        user = obj.server
        if user is None:
            return None
        return user.get_full_name() or user.get_username()
