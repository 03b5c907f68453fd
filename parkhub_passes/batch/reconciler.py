"""
Result reconciliation.

Turns per-item outcomes into ``BatchSummary`` objects and rebuilds the
requests for a "retry failed only" pass.
"""

from typing import Dict, Iterable, List, Optional

from pydantic.alias_generators import to_camel

from ..models.passes import CreationRequest
from ..models.results import (
    BatchSummary,
    CreationFailure,
    CreationOutcome,
    CreationSuccess,
    ReferenceDefaults,
)
from ..observability.logging import ParkHubLogger

# Fields not carried by a failure record
_REFERENCE_FIELDS = ("event_id", "account_id", "spot_type", "lot_id")


class ResultReconciler:
    """Builds summaries and retry batches."""

    def __init__(self):
        self.logger = ParkHubLogger("reconciler")

    def summarize(
        self,
        event_id: Optional[str],
        outcomes: Iterable[CreationOutcome]
    ) -> BatchSummary:
        successful = []
        failed = []
        for outcome in outcomes:
            if isinstance(outcome, CreationSuccess):
                successful.append(outcome)
            elif isinstance(outcome, CreationFailure):
                failed.append(outcome)
            else:
                raise TypeError(f"Unexpected outcome type: {type(outcome).__name__}")
        return BatchSummary(
            event_id=event_id,
            successful=tuple(successful),
            failed=tuple(failed),
        )

    def build_retry_batch(
        self,
        prior: BatchSummary,
        selected_failures: Optional[Iterable[CreationFailure]] = None,
        reference_defaults: Optional[ReferenceDefaults] = None,
        original_requests: Optional[Iterable[CreationRequest]] = None
    ) -> List[CreationRequest]:
        """
        Rebuild creation requests for failed items.

        Args:
            prior: Summary of the previous run
            selected_failures: Subset of ``prior.failed`` to retry (all by default)
            reference_defaults: Fallback values for fields a failure does not carry
            original_requests: Requests of the previous run, matched by barcode

        Returns:
            New requests, one per distinct barcode that has not already succeeded

        Raises:
            ValueError: A selection is not a failure of ``prior``, or a field
                cannot be resolved
        """
        if selected_failures is None:
            selections = list(prior.failed)
        else:
            selections = list(selected_failures)
            for selection in selections:
                if selection not in prior.failed:
                    raise ValueError(
                        f"Failure for barcode '{selection.barcode}' is not part of this summary"
                    )

        defaults = reference_defaults or ReferenceDefaults()
        originals: Dict[str, CreationRequest] = {}
        for request in original_requests or ():
            originals.setdefault(request.barcode, request)

        succeeded = {success.barcode for success in prior.successful}
        queued = set()
        retry_requests = []

        for failure in selections:
            if failure.barcode in succeeded:
                self.logger.debug("Skipping barcode that already succeeded", barcode=failure.barcode)
                continue
            if failure.barcode in queued:
                continue

            original = originals.get(failure.barcode)
            values = {
                "barcode": failure.barcode,
                "customer_name": failure.customer_name or (original.customer_name if original else None),
            }
            for name in _REFERENCE_FIELDS:
                value = getattr(original, name, None) if original else None
                if not value:
                    value = getattr(defaults, name)
                if not value and name == "event_id":
                    value = prior.event_id
                values[name] = value

            unresolved = [to_camel(name) for name, value in values.items() if not value]
            if unresolved:
                raise ValueError(
                    f"Cannot rebuild request for barcode '{failure.barcode}': "
                    f"missing {', '.join(unresolved)}"
                )

            retry_requests.append(CreationRequest(**values))
            queued.add(failure.barcode)

        return retry_requests

    def merge(self, prior: BatchSummary, retry: BatchSummary) -> BatchSummary:
        """
        Cumulative view of a run and its retry.

        Prior failures are replaced by the retry outcome for the same barcode.
        """
        retried = {s.barcode for s in retry.successful} | {f.barcode for f in retry.failed}
        remaining = tuple(f for f in prior.failed if f.barcode not in retried)
        return BatchSummary(
            event_id=prior.event_id or retry.event_id,
            successful=prior.successful + retry.successful,
            failed=remaining + retry.failed,
        )
