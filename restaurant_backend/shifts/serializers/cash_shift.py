# shifts/serializers/cash_shift.py

from decimal import Decimal

from rest_framework import serializers

from shifts.models import CashShift


class CashShiftSerializer(serializers.ModelSerializer):
    is_open = serializers.BooleanField(read_only=True)

    class Meta:
        model = CashShift
        fields = [
            "id",
            "user",
            "business_date",
            "start_time",
            "end_time",
            "starting_cash",
            "ending_cash",
            "is_open",
        ]
        read_only_fields = fields


class OpenShiftInputSerializer(serializers.Serializer):
    starting_cash = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0.00")
    )


class CloseShiftInputSerializer(serializers.Serializer):
    ending_cash = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
