# shifts/services/exceptions.py


class ShiftError(Exception):
    """Base exception for cash shift operations."""

    code = "SHIFT_ERROR"


class ShiftAlreadyOpenError(ShiftError):
    code = "SHIFT_ALREADY_OPEN"


class NoActiveShiftError(ShiftError):
    code = "NO_ACTIVE_SHIFT"
