from .cash_shift import CashShiftSerializer, CloseShiftInputSerializer, OpenShiftInputSerializer

__all__ = ["CashShiftSerializer", "OpenShiftInputSerializer", "CloseShiftInputSerializer"]
