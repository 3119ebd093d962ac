# orders/api/views.py

"""
ORDERS API VIEWS

Purpose:
- Order intake (create, add items) and browsing (list / retrieve)
- Status changes, serve-all and per-item kitchen progress
- Kitchen queue for the current business day

Hard rules:
- Views only translate HTTP <-> service calls. All writes go through
  orders.services; no view mutates a model directly.
- Domain errors are normalized by orders.api.errors.
"""

from __future__ import annotations

from datetime import date

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.api.errors import serializer_error_response, service_error_response
from orders.api.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    AddItemsInputSerializer,
    CreateOrderInputSerializer,
    ItemStatusInputSerializer,
    OrderItemSerializer,
    OrderSerializer,
    StatusInputSerializer,
)
from orders.services.exceptions import OrderNotFoundError, OrderServiceError
from orders.services.order_creation import create_order
from orders.services.order_items import add_items_to_order
from orders.services.order_kitchen import (
    active_kitchen_orders,
    mark_all_served,
    update_item_status,
)
from orders.services.order_status import allowed_transitions, update_status


def _order_queryset():
    return Order.objects.select_related("server", "shift").prefetch_related(
        "items__product", "payments"
    )


def _reload(order_id) -> Order:
    return _order_queryset().get(pk=order_id)


# =====================================================
# LIST / CREATE
# =====================================================

class OrderListCreateView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def get_queryset(self):
        return _order_queryset()

    @extend_schema(
        request=CreateOrderInputSerializer,
        responses={201: OrderSerializer},
        description="Create an order for the cashier's open shift (number, payments, stock, KDS)",
    )
    def post(self, request):
        ser = CreateOrderInputSerializer(data=request.data)
        if not ser.is_valid():
            return serializer_error_response(ser.errors)

        data = ser.validated_data
        try:
            order = create_order(
                user=request.user,
                items=[
                    {
                        "product_id": line["product_id"],
                        "quantity": line["quantity"],
                        "notes": line.get("notes", ""),
                    }
                    for line in data["items"]
                ],
                channel=data.get("channel"),
                payment_method=data.get("payment_method"),
                payments=[dict(p) for p in data.get("payments") or []] or None,
                customer_name=data.get("customer_name", ""),
                customer_phone=data.get("customer_phone", ""),
                delivery_address=data.get("delivery_address", ""),
                delivery_notes=data.get("delivery_notes", ""),
            )
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(_reload(order.pk)).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, pk):
        order = _order_queryset().filter(pk=pk).first()
        if order is None:
            return service_error_response(OrderNotFoundError("Order"))
        return Response(OrderSerializer(order).data)


# =====================================================
# STATUS
# =====================================================

class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(
        request=StatusInputSerializer,
        responses={200: OrderSerializer},
        description="Change the order status (lenient unless strict transitions are enabled)",
    )
    def patch(self, request, pk):
        ser = StatusInputSerializer(data=request.data)
        if not ser.is_valid():
            return serializer_error_response(ser.errors)

        try:
            order = update_status(order_id=pk, target_status=ser.validated_data["status"])
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(_reload(order.pk)).data)


class OrderAddItemsView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(
        request=AddItemsInputSerializer,
        responses={200: OrderSerializer},
        description="Add items to an unpaid order (a delivered order is reopened)",
    )
    def post(self, request, pk):
        ser = AddItemsInputSerializer(data=request.data)
        if not ser.is_valid():
            return serializer_error_response(ser.errors)

        try:
            order = add_items_to_order(
                order_id=pk,
                items=[
                    {
                        "product_id": line["product_id"],
                        "quantity": line["quantity"],
                        "notes": line.get("notes", ""),
                    }
                    for line in ser.validated_data["items"]
                ],
                user=request.user,
            )
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(_reload(order.pk)).data)


class OrderServeAllView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(request=None, responses={200: OrderSerializer})
    def post(self, request, pk):
        try:
            order = mark_all_served(order_id=pk)
        except OrderServiceError as exc:
            return service_error_response(exc)
        return Response(OrderSerializer(_reload(order.pk)).data)


class OrderTransitionsView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = None

    @extend_schema(responses={200: dict}, description="Statuses reachable from the current one")
    def get(self, request, pk):
        order = Order.objects.filter(pk=pk).only("id", "status").first()
        if order is None:
            return service_error_response(OrderNotFoundError("Order"))
        return Response(
            {
                "order_id": str(order.pk),
                "status": order.status,
                "allowed": sorted(allowed_transitions(order.status)),
            }
        )


class OrderItemStatusView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderItemSerializer

    @extend_schema(request=ItemStatusInputSerializer, responses={200: OrderItemSerializer})
    def patch(self, request, item_id):
        ser = ItemStatusInputSerializer(data=request.data)
        if not ser.is_valid():
            return serializer_error_response(ser.errors)

        try:
            item = update_item_status(item_id=item_id, target_status=ser.validated_data["status"])
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderItemSerializer(item).data)


# =====================================================
# KITCHEN
# =====================================================

class KitchenQueueView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(
        parameters=[OpenApiParameter("business_date", str, required=False)],
        responses={200: OrderSerializer(many=True)},
        description="Active orders for the kitchen, oldest first",
    )
    def get(self, request):
        business_date = None
        raw = (request.query_params.get("business_date") or "").strip()
        if raw:
            try:
                business_date = date.fromisoformat(raw)
            except ValueError:
                return serializer_error_response({"business_date": ["Use YYYY-MM-DD."]})

        orders = active_kitchen_orders(business_date=business_date)
        payload = []
        for order in orders:
            data = OrderSerializer(order).data
            data["items"] = OrderItemSerializer(order.kitchen_items, many=True).data
            payload.append(data)
        return Response(payload)
