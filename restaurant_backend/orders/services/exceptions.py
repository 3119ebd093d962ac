# orders/services/exceptions.py

"""
ORDER SERVICE ERRORS

Centralized domain errors for the orders services.
Each error carries a stable `code` used by the API error envelope.
"""


class OrderServiceError(Exception):
    """Base exception for all order service failures."""

    code = "ORDER_ERROR"


class OrderNotFoundError(OrderServiceError):
    """Raised when an order (or order item) cannot be found by id."""

    code = "NOT_FOUND"

    def __init__(self, resource: str = "Order"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class OrderValidationError(OrderServiceError):
    """Raised on malformed input, before any persistence attempt."""

    code = "VALIDATION_ERROR"


class NoOpenShiftError(OrderServiceError):
    """Raised when an order is taken by a user without an open cash shift."""

    code = "NO_OPEN_SHIFT"


class InvalidTransitionError(OrderServiceError):
    """Raised (strict mode only) for a status change outside the transition table."""

    code = "INVALID_TRANSITION"

    def __init__(self, *, from_status: str, to_status: str, allowed=()):
        allowed = sorted(allowed)
        super().__init__(
            f"Invalid status transition from {from_status} to {to_status}. "
            f"Allowed transitions: {', '.join(allowed) or 'none'}"
        )
        self.from_status = from_status
        self.to_status = to_status
        self.allowed = allowed


class OrderNumberGenerationError(OrderServiceError):
    """Raised when no order number could be drawn; aborts order creation."""

    def __init__(self, message: str, code: str = "ORDER_NUMBER_GENERATION_FAILED", context=None):
        super().__init__(message)
        self.code = code
        self.context = dict(context or {})


class OrderNotModifiableError(OrderServiceError):
    """Raised when items are added to a fully paid or cancelled order."""

    code = "ORDER_NOT_MODIFIABLE"
