"""
Batch pass creation.

The API has no batch endpoint, so a batch is many independent creation
calls. Calls run in chunks of at most ``chunk_size``; a chunk starts only
after the previous one has settled. A failing item never affects the
others: every exception is classified and recorded as that item's outcome.
"""

import asyncio
import time
from typing import Callable, Iterable, List, Optional

from ..config.constants import DEFAULT_CHUNK_SIZE, MAX_CHUNK_SIZE
from ..models.passes import CreationRequest
from ..models.results import BatchSummary, CreationFailure, CreationOutcome
from ..observability.logging import ParkHubLogger
from ..reliability.codes import ErrorCode
from ..reliability.error_classifier import ErrorClassifier
from ..reliability.errors import ValidationError
from ..services.passes import PassesApi
from .errors import BatchCancelledError
from .reconciler import ResultReconciler

# (completed, total)
ProgressCallback = Callable[[int, int], None]


class BatchOrchestrator:
    """Fans out creation requests with bounded concurrency."""

    def __init__(
        self,
        passes_api: PassesApi,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        on_progress: Optional[ProgressCallback] = None,
        reconciler: Optional[ResultReconciler] = None
    ):
        if not 1 <= chunk_size <= MAX_CHUNK_SIZE:
            raise ValueError(f"chunk_size must be between 1 and {MAX_CHUNK_SIZE}")
        self.passes_api = passes_api
        self.chunk_size = chunk_size
        self.on_progress = on_progress
        self.reconciler = reconciler or ResultReconciler()
        self.logger = ParkHubLogger("batch")

    async def create_batch(
        self,
        requests: Iterable[CreationRequest],
        cancel_event: Optional[asyncio.Event] = None
    ) -> BatchSummary:
        """
        Create one pass per request.

        Args:
            requests: Creation requests; barcodes should be unique
            cancel_event: When set, no further chunk is started

        Returns:
            Summary with exactly one outcome per request

        Raises:
            ValueError: ``requests`` is empty
            AuthenticationError: No API key is configured
            BatchCancelledError: ``cancel_event`` was set before the batch finished
        """
        requests = list(requests)
        if not requests:
            raise ValueError("requests must not be empty")
        self.passes_api.client.require_api_key()

        event_id = requests[0].event_id
        total = len(requests)
        outcomes: List[Optional[CreationOutcome]] = [None] * total
        seen_barcodes = set()
        completed = 0
        start_time = time.time()

        self.logger.info(
            "Starting batch",
            event_id=event_id,
            total=total,
            chunk_size=self.chunk_size
        )

        for chunk_start in range(0, total, self.chunk_size):
            if cancel_event is not None and cancel_event.is_set():
                partial = self.reconciler.summarize(
                    event_id, [o for o in outcomes if o is not None]
                )
                pending = requests[chunk_start:]
                self.logger.warning(
                    "Batch cancelled",
                    event_id=event_id,
                    settled=partial.total,
                    pending=len(pending)
                )
                raise BatchCancelledError(partial, pending)

            indices = range(chunk_start, min(chunk_start + self.chunk_size, total))
            dispatch = []
            for index in indices:
                request = requests[index]
                if request.barcode in seen_barcodes:
                    outcomes[index] = self._duplicate_failure(request)
                    continue
                seen_barcodes.add(request.barcode)
                dispatch.append(index)

            results = await asyncio.gather(
                *[self.passes_api.create_pass(requests[index]) for index in dispatch],
                return_exceptions=True
            )

            for index, result in zip(dispatch, results):
                if isinstance(result, Exception):
                    request = requests[index]
                    outcomes[index] = CreationFailure(
                        barcode=request.barcode,
                        customer_name=request.customer_name,
                        error=ErrorClassifier.classify(result),
                    )
                elif isinstance(result, BaseException):
                    # CancelledError and friends are never recorded as outcomes
                    raise result
                else:
                    outcomes[index] = result

            completed += len(indices)
            self.logger.debug(
                "Chunk settled",
                event_id=event_id,
                completed=completed,
                total=total
            )
            if self.on_progress is not None:
                self.on_progress(completed, total)

        summary = self.reconciler.summarize(event_id, outcomes)
        self.logger.log_batch_summary(
            event_id, summary.total_success, summary.total_failed, time.time() - start_time
        )
        return summary

    @staticmethod
    def _duplicate_failure(request: CreationRequest) -> CreationFailure:
        return CreationFailure(
            barcode=request.barcode,
            customer_name=request.customer_name,
            error=ValidationError(ErrorCode.DUPLICATE_BARCODE, field="barcode"),
        )
