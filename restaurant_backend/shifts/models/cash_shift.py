# shifts/models/cash_shift.py

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

User = settings.AUTH_USER_MODEL


class CashShift(models.Model):
    """
    A cashier's working session at the till.

    RULES:
    - At most ONE open shift (end_time IS NULL) per user, enforced in the DB
    - business_date is fixed when the shift opens; every order taken during
      the shift inherits it, even after midnight
    """

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="cash_shifts",
    )

    business_date = models.DateField(db_index=True)

    start_time = models.DateTimeField()
    end_time = models.DateTimeField(null=True, blank=True)

    starting_cash = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    ending_cash = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(end_time__isnull=True),
                name="one_open_shift_per_user",
            ),
        ]

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def __str__(self):
        state = "open" if self.is_open else "closed"
        return f"Shift {self.pk} | {self.user} | {self.business_date} ({state})"
