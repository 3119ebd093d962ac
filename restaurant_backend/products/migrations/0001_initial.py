import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Ingredient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120, unique=True)),
                ("unit", models.CharField(default="unit", max_length=16)),
                ("stock", models.DecimalField(decimal_places=3, default=Decimal("0.000"), max_digits=12)),
                ("min_stock", models.DecimalField(decimal_places=3, default=Decimal("0.000"), help_text="Low-stock warning threshold", max_digits=12)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sku", models.CharField(db_index=True, max_length=128, unique=True)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("is_stockable", models.BooleanField(default=True, help_text="If false, orders never deduct ingredient stock for this product.")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="ProductIngredient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.001"))])),
                ("ingredient", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="used_in", to="products.ingredient")),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="recipe", to="products.product")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("product", "ingredient"), name="unique_recipe_line"),
                ],
            },
        ),
    ]
