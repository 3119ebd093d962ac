import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("products", "0001_initial"),
        ("shifts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OrderSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sequence_key", models.CharField(max_length=12, unique=True)),
                ("current_value", models.PositiveIntegerField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-sequence_key"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("current_value__gte", 0)), name="order_sequence_value_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_number", models.PositiveIntegerField(help_text="Display number, sequential within its sequence_key")),
                ("sequence_key", models.CharField(help_text="Shard key the order number was drawn from (YYYYMMDD or YYYYMMDDHH)", max_length=12)),
                ("business_date", models.DateField(help_text="Operational day (6 AM cutoff), used for accounting grouping")),
                ("channel", models.CharField(choices=[("POS", "Counter"), ("TABLE", "Table"), ("TAKEAWAY", "Takeaway"), ("DELIVERY", "Delivery")], default="POS", max_length=16)),
                ("status", models.CharField(choices=[("OPEN", "Open"), ("CONFIRMED", "Confirmed"), ("IN_PREPARATION", "In preparation"), ("PREPARED", "Prepared"), ("ON_ROUTE", "On route"), ("DELIVERED", "Delivered"), ("CANCELLED", "Cancelled")], default="OPEN", max_length=20)),
                ("payment_status", models.CharField(choices=[("PENDING", "Pending"), ("PARTIAL", "Partially paid"), ("PAID", "Paid")], default="PENDING", max_length=16)),
                ("subtotal_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("customer_name", models.CharField(blank=True, default="", max_length=120)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=40)),
                ("delivery_address", models.CharField(blank=True, default="", max_length=255)),
                ("delivery_notes", models.CharField(blank=True, default="", max_length=255)),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("server", models.ForeignKey(blank=True, help_text="Waiter / cashier who took the order", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="served_orders", to=settings.AUTH_USER_MODEL)),
                ("shift", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="shifts.cashshift")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("sequence_key", "order_number"), name="unique_order_number_per_sequence"),
                ],
                "indexes": [
                    models.Index(fields=["business_date", "order_number"], name="order_bizdate_number"),
                    models.Index(fields=["status"], name="order_status"),
                    models.Index(fields=["business_date", "status"], name="order_bizdate_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("unit_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Product price snapshot at order time", max_digits=12)),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("COOKING", "Cooking"), ("READY", "Ready"), ("SERVED", "Served")], default="PENDING", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_items", to="products.product")),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["order", "status"], name="orderitem_order_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("method", models.CharField(choices=[("CASH", "Cash"), ("CARD", "Card"), ("TRANSFER", "Bank transfer"), ("QR", "QR wallet")], max_length=16)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="orders.order")),
                ("shift", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="shifts.cashshift")),
            ],
            options={"ordering": ["created_at", "id"]},
        ),
    ]
