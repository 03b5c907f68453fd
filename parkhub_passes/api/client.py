"""Main client interface for the ParkHub pass SDK."""

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx

from ..batch.orchestrator import BatchOrchestrator, ProgressCallback
from ..batch.reconciler import ResultReconciler
from ..config.settings import ClientConfig
from ..http.client import AuthenticatedClient
from ..models.api import ApiResponse
from ..models.events import ParkHubEvent
from ..models.passes import CreationRequest, ParkHubPass
from ..models.results import (
    BatchSummary,
    CreationFailure,
    CreationSuccess,
    ReferenceDefaults,
)
from ..reliability.retry import RetryManager
from ..services.events import EventsApi
from ..services.passes import PassesApi
from ..storage.credentials import CredentialStore

RequestLike = Union[CreationRequest, Dict[str, Any]]


class ParkHubPassClient:
    """High-level client: events, passes and batch creation with retry."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        api_key: Optional[str] = None,
        credential_store: Optional[CredentialStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_manager: Optional[RetryManager] = None,
        on_progress: Optional[ProgressCallback] = None
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration (defaults to ``ClientConfig()``)
            api_key: Initial API key, overriding ``config.api_key``
            credential_store: Optional store the key is read from and saved to
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``)
            retry_manager: Optional retry manager replacing the config-based one
            on_progress: Called as ``on_progress(completed, total)`` after each chunk
        """
        self.config = config or ClientConfig()
        self.http = AuthenticatedClient(
            self.config,
            api_key=api_key,
            credential_store=credential_store,
            transport=transport,
            retry_manager=retry_manager,
        )
        self.events = EventsApi(self.http)
        self.passes = PassesApi(self.http)
        self.reconciler = ResultReconciler()
        self.orchestrator = BatchOrchestrator(
            self.passes,
            chunk_size=self.config.chunk_size,
            on_progress=on_progress,
            reconciler=self.reconciler,
        )

    async def __aenter__(self) -> "ParkHubPassClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    def set_api_key(self, api_key: str) -> None:
        self.http.set_api_key(api_key)

    def clear_api_key(self) -> None:
        self.http.clear_api_key()

    async def get_events(
        self,
        landmark_id: Optional[str] = None,
        date_from: Optional[str] = None
    ) -> ApiResponse[List[ParkHubEvent]]:
        return await self.events.get_events(landmark_id=landmark_id, date_from=date_from)

    async def get_passes(
        self,
        event_id: str,
        landmark_id: Optional[str] = None
    ) -> ApiResponse[List[ParkHubPass]]:
        return await self.passes.get_passes_for_event(event_id, landmark_id=landmark_id)

    async def create_pass(self, request: RequestLike) -> CreationSuccess:
        return await self.passes.create_pass(self._coerce(request))

    async def create_batch(
        self,
        requests: Iterable[RequestLike],
        cancel_event: Optional[asyncio.Event] = None
    ) -> BatchSummary:
        """Create passes for all requests; see ``BatchOrchestrator.create_batch``."""
        return await self.orchestrator.create_batch(
            [self._coerce(r) for r in requests],
            cancel_event=cancel_event,
        )

    def build_retry_batch(
        self,
        prior: BatchSummary,
        selected_failures: Optional[Iterable[CreationFailure]] = None,
        reference_defaults: Optional[ReferenceDefaults] = None,
        original_requests: Optional[Iterable[RequestLike]] = None
    ) -> List[CreationRequest]:
        originals = None
        if original_requests is not None:
            originals = [self._coerce(r) for r in original_requests]
        return self.reconciler.build_retry_batch(
            prior,
            selected_failures=selected_failures,
            reference_defaults=reference_defaults,
            original_requests=originals,
        )

    async def retry_failed(
        self,
        prior: BatchSummary,
        selected_failures: Optional[Iterable[CreationFailure]] = None,
        reference_defaults: Optional[ReferenceDefaults] = None,
        original_requests: Optional[Iterable[RequestLike]] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> BatchSummary:
        """
        Re-submit failed items of ``prior`` and return the retry summary.

        The returned summary covers only the re-submitted items; use
        ``merge_results`` for a cumulative view.
        """
        retry_requests = self.build_retry_batch(
            prior,
            selected_failures=selected_failures,
            reference_defaults=reference_defaults,
            original_requests=original_requests,
        )
        if not retry_requests:
            return BatchSummary(event_id=prior.event_id)
        return await self.create_batch(retry_requests, cancel_event=cancel_event)

    def merge_results(self, prior: BatchSummary, retry: BatchSummary) -> BatchSummary:
        return self.reconciler.merge(prior, retry)

    @staticmethod
    def _coerce(request: RequestLike) -> CreationRequest:
        if isinstance(request, CreationRequest):
            return request
        return CreationRequest.model_validate(request)
