# orders/api/urls.py

from django.urls import path

from orders.api.views import (
    KitchenQueueView,
    OrderAddItemsView,
    OrderDetailView,
    OrderItemStatusView,
    OrderListCreateView,
    OrderServeAllView,
    OrderStatusView,
    OrderTransitionsView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list"),
    path("kitchen/", KitchenQueueView.as_view(), name="kitchen-queue"),
    path("items/<int:item_id>/status/", OrderItemStatusView.as_view(), name="item-status"),
    path("<uuid:pk>/", OrderDetailView.as_view(), name="order-detail"),
    path("<uuid:pk>/items/", OrderAddItemsView.as_view(), name="order-add-items"),
    path("<uuid:pk>/status/", OrderStatusView.as_view(), name="order-status"),
    path("<uuid:pk>/serve-all/", OrderServeAllView.as_view(), name="order-serve-all"),
    path("<uuid:pk>/transitions/", OrderTransitionsView.as_view(), name="order-transitions"),
]
