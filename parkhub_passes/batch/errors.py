"""Batch-level error definitions."""

from typing import List

from ..models.passes import CreationRequest
from ..models.results import BatchSummary


class BatchCancelledError(Exception):
    """Raised when a batch is cancelled between chunks."""

    def __init__(self, partial: BatchSummary, pending: List[CreationRequest]):
        self.partial = partial
        self.pending = list(pending)

        message = (
            f"Batch cancelled after {partial.total} item(s); "
            f"{len(self.pending)} not dispatched"
        )
        super().__init__(message)
