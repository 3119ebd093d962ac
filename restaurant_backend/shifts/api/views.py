# shifts/api/views.py

"""
CASH SHIFT API

- POST /api/shifts/open/   -> open a shift for the authenticated user
- POST /api/shifts/close/  -> close it with the counted cash
- GET  /api/shifts/active/ -> the user's open shift
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.api.errors import error_response, serializer_error_response
from shifts.serializers import (
    CashShiftSerializer,
    CloseShiftInputSerializer,
    OpenShiftInputSerializer,
)
from shifts.services import (
    NoActiveShiftError,
    ShiftAlreadyOpenError,
    ShiftError,
    close_shift,
    get_active_shift,
    open_shift,
)


def _shift_error(exc: ShiftError):
    if isinstance(exc, (ShiftAlreadyOpenError, NoActiveShiftError)):
        http_status = status.HTTP_409_CONFLICT
    else:
        http_status = status.HTTP_400_BAD_REQUEST
    return error_response(code=exc.code, message=str(exc), http_status=http_status)


class OpenShiftView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CashShiftSerializer

    @extend_schema(request=OpenShiftInputSerializer, responses={201: CashShiftSerializer})
    def post(self, request):
        ser = OpenShiftInputSerializer(data=request.data)
        if not ser.is_valid():
            return serializer_error_response(ser.errors)
        try:
            shift = open_shift(user=request.user, starting_cash=ser.validated_data["starting_cash"])
        except ShiftError as exc:
            return _shift_error(exc)
        return Response(CashShiftSerializer(shift).data, status=status.HTTP_201_CREATED)


class CloseShiftView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CashShiftSerializer

    @extend_schema(request=CloseShiftInputSerializer, responses={200: CashShiftSerializer})
    def post(self, request):
        ser = CloseShiftInputSerializer(data=request.data)
        if not ser.is_valid():
            return serializer_error_response(ser.errors)
        try:
            shift = close_shift(user=request.user, ending_cash=ser.validated_data["ending_cash"])
        except ShiftError as exc:
            return _shift_error(exc)
        return Response(CashShiftSerializer(shift).data)


class ActiveShiftView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CashShiftSerializer

    @extend_schema(responses={200: CashShiftSerializer})
    def get(self, request):
        shift = get_active_shift(user=request.user)
        if shift is None:
            return error_response(
                code=NoActiveShiftError.code,
                message="User has no open cash shift",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(CashShiftSerializer(shift).data)
