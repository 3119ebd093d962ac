from .exceptions import NoActiveShiftError, ShiftAlreadyOpenError, ShiftError
from .shift_service import (
    close_shift,
    determine_business_date,
    get_active_shift,
    open_shift,
)

__all__ = [
    "ShiftError",
    "ShiftAlreadyOpenError",
    "NoActiveShiftError",
    "open_shift",
    "close_shift",
    "get_active_shift",
    "determine_business_date",
]
