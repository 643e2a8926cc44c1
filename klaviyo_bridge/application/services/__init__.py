"""Service orchestrators."""

from .dispatch_service import DispatchReceipt, DispatchService

__all__ = ["DispatchReceipt", "DispatchService"]
