"""Batch creation and reconciliation."""

from .errors import BatchCancelledError
from .orchestrator import BatchOrchestrator
from .reconciler import ResultReconciler

__all__ = ["BatchCancelledError", "BatchOrchestrator", "ResultReconciler"]
