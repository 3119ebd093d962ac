from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="FeatureConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_name", models.CharField(default="My Restaurant", max_length=120)),
                ("currency_symbol", models.CharField(default="$", max_length=8)),
                ("enable_stock", models.BooleanField(default=True, help_text="Deduct ingredient stock when orders are created.")),
                ("enable_kds", models.BooleanField(default=True, help_text="Publish order events to kitchen display clients.")),
                ("enable_delivery", models.BooleanField(default=False, help_text="Accept DELIVERY channel orders.")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Feature configuration",
                "verbose_name_plural": "Feature configuration",
            },
        ),
    ]
