from django.contrib import admin

from orders.models import Order, OrderItem, OrderSequence, Payment


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "unit_price", "status", "created_at")


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ("method", "amount", "shift", "created_at")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "business_date",
        "sequence_key",
        "channel",
        "status",
        "payment_status",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "payment_status", "channel", "business_date")
    search_fields = ("id", "customer_name", "customer_phone")
    ordering = ("-created_at",)
    inlines = [OrderItemInline, PaymentInline]

    # order_number / sequence_key are issued by the sequence; never hand-edited
    readonly_fields = (
        "order_number",
        "sequence_key",
        "business_date",
        "created_at",
        "updated_at",
    )


@admin.register(OrderSequence)
class OrderSequenceAdmin(admin.ModelAdmin):
    list_display = ("sequence_key", "current_value", "updated_at")
    search_fields = ("sequence_key",)
    ordering = ("-sequence_key",)
    readonly_fields = ("sequence_key", "current_value", "created_at", "updated_at")
