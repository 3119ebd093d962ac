from .cash_shift import CashShift

__all__ = ["CashShift"]
