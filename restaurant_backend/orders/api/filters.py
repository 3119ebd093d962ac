# orders/api/filters.py

import django_filters

from orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=Order.Status.choices)
    channel = django_filters.ChoiceFilter(choices=Order.Channel.choices)
    business_date = django_filters.DateFilter()
    order_number = django_filters.NumberFilter()

    class Meta:
        model = Order
        fields = ["status", "channel", "business_date", "order_number"]
