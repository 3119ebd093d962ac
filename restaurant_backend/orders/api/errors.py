# orders/api/errors.py

"""
API ERROR NORMALIZATION

Every domain error leaves the API as:
    {"error": {"code": "...", "message": "..."}}
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from orders.services.exceptions import (
    InvalidTransitionError,
    NoOpenShiftError,
    OrderNotFoundError,
    OrderNotModifiableError,
    OrderNumberGenerationError,
    OrderServiceError,
    OrderValidationError,
)

HTTP_STATUS_BY_ERROR = (
    (OrderNotFoundError, status.HTTP_404_NOT_FOUND),
    (OrderValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (NoOpenShiftError, status.HTTP_409_CONFLICT),
    (OrderNotModifiableError, status.HTTP_409_CONFLICT),
    (OrderNumberGenerationError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def service_error_response(exc: OrderServiceError):
    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, mapped in HTTP_STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            http_status = mapped
            break
    return error_response(code=exc.code, message=str(exc), http_status=http_status)


def serializer_error_response(errors):
    """
    Flatten DRF serializer errors into the envelope (first message wins).
    """
    message = "Invalid request"
    if isinstance(errors, dict):
        for field, messages in errors.items():
            first = messages[0] if isinstance(messages, list) and messages else messages
            message = f"{field}: {first}" if field != "non_field_errors" else str(first)
            break
    elif isinstance(errors, list) and errors:
        message = str(errors[0])
    return error_response(
        code=OrderValidationError.code,
        message=message,
        http_status=status.HTTP_400_BAD_REQUEST,
    )
