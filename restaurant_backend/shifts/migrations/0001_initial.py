from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CashShift",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_date", models.DateField(db_index=True)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("starting_cash", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("ending_cash", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="cash_shifts", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-start_time"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("end_time__isnull", True)), fields=("user",), name="one_open_shift_per_user"),
                ],
            },
        ),
    ]
