from django.contrib import admin

from shifts.models import CashShift


@admin.register(CashShift)
class CashShiftAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "business_date", "start_time", "end_time", "starting_cash", "ending_cash")
    list_filter = ("business_date",)
    search_fields = ("user__username",)
    ordering = ("-start_time",)
