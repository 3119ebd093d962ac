import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("products", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("movement_type", models.CharField(choices=[("PURCHASE", "Purchase"), ("SALE", "Sale"), ("WASTE", "Waste"), ("ADJUSTMENT", "Manual Adjustment")], max_length=16)),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=12)),
                ("reason", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("ingredient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="stock_movements", to="products.ingredient")),
                ("order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="stock_movements", to="orders.order")),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["ingredient", "created_at"], name="stockmove_ingredient_created")],
            },
        ),
    ]
