"""
Authenticated HTTP client for the ParkHub API.

Wraps ``httpx.AsyncClient`` with bearer authentication, envelope
normalisation, error classification, optional retry and interceptor hooks.
"""

from typing import Any, Callable, Dict, Optional

import httpx

from ..config.settings import ClientConfig
from ..models.api import ApiResponse
from ..observability.logging import ParkHubLogger
from ..reliability.codes import ErrorCode
from ..reliability.error_classifier import ErrorClassifier
from ..reliability.errors import AppError, AuthenticationError, UnknownError
from ..reliability.retry import RetryManager, RetryPolicy
from ..storage.credentials import CredentialStore
from .interceptors import REQUEST, RESPONSE, InterceptorRegistry


class AuthenticatedClient:
    """
    Performs authenticated calls and returns ``ApiResponse`` envelopes.

    The API key is held here and changed only through ``set_api_key`` and
    ``clear_api_key``. Each call reads the key once when it is issued, so a
    rotation never affects calls already in flight.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        api_key: Optional[str] = None,
        credential_store: Optional[CredentialStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_manager: Optional[RetryManager] = None
    ):
        self.config = config or ClientConfig()
        self.credential_store = credential_store
        self._api_key = api_key or self.config.api_key
        if not self._api_key and credential_store is not None:
            self._api_key = credential_store.get()

        self.retry_manager = retry_manager or RetryManager(
            RetryPolicy(
                max_retries=self.config.max_retries,
                base_delay_ms=self.config.base_delay_ms,
                max_delay_ms=self.config.max_delay_ms,
            )
        )
        self.interceptors = InterceptorRegistry()
        self.logger = ParkHubLogger("client")
        self._http = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "AuthenticatedClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # Credential

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, api_key: str) -> None:
        """Rotate the credential; later calls use the new key."""
        if not api_key or not api_key.strip():
            raise ValueError("API key must not be empty")
        self._api_key = api_key.strip()
        if self.credential_store is not None:
            self.credential_store.set(self._api_key)
        self.logger.info("API key updated")

    def clear_api_key(self) -> None:
        self._api_key = None
        if self.credential_store is not None:
            self.credential_store.remove()
        self.logger.info("API key cleared")

    def require_api_key(self) -> str:
        """Return the current key or raise ``AuthenticationError(MISSING_API_KEY)``."""
        if not self._api_key:
            raise AuthenticationError(ErrorCode.MISSING_API_KEY)
        return self._api_key

    # Interceptors

    def add_request_interceptor(self, fn: Callable[[httpx.Request], Any]) -> int:
        return self.interceptors.add(REQUEST, fn)

    def add_response_interceptor(self, fn: Callable[[httpx.Response], Any]) -> int:
        return self.interceptors.add(RESPONSE, fn)

    def remove_interceptor(self, kind: str, interceptor_id: int) -> bool:
        return self.interceptors.remove(kind, interceptor_id)

    # Requests

    async def get(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        retry: Optional[bool] = None,
        max_retries: Optional[int] = None,
        raise_errors: bool = False
    ) -> ApiResponse:
        if retry is None:
            retry = self.config.retry_reads
        return await self._request(
            "GET", path,
            params=params,
            retry=retry,
            max_retries=max_retries,
            raise_errors=raise_errors,
        )

    async def post(
        self,
        path: str,
        body: Any = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        retry: Optional[bool] = None,
        max_retries: Optional[int] = None,
        raise_errors: bool = False
    ) -> ApiResponse:
        if retry is None:
            retry = self.config.retry_creates
        return await self._request(
            "POST", path,
            params=params,
            json=body,
            retry=retry,
            max_retries=max_retries,
            raise_errors=raise_errors,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        retry: bool,
        max_retries: Optional[int],
        raise_errors: bool
    ) -> ApiResponse:
        # Raised before any I/O regardless of raise_errors
        api_key = self.require_api_key()
        headers = {"Authorization": f"Bearer {api_key}"}

        async def attempt() -> ApiResponse:
            request = self._http.build_request(
                method, path, params=params, json=json, headers=headers
            )
            request = await self.interceptors.apply(REQUEST, request)
            response = await self._http.send(request)
            response = await self.interceptors.apply(RESPONSE, response)
            return self._handle_response(response)

        try:
            with self.logger.track_request(method, path) as meta:
                if retry:
                    result = await self.retry_manager.execute_with_retry(
                        attempt,
                        max_retries=max_retries,
                        on_retry=lambda error, n, delay_ms: self.logger.debug(
                            f"Retry {n} after {error.code.value}",
                            request_id=meta["request_id"],
                            delay_ms=int(delay_ms),
                        ),
                    )
                else:
                    try:
                        result = await attempt()
                    except AppError:
                        raise
                    except Exception as exc:  # noqa: BLE001
                        raise ErrorClassifier.classify(exc) from exc
                meta["status"] = "ok"
                return result
        except AppError as error:
            self._on_error(error, api_key)
            if raise_errors:
                raise
            return ApiResponse.failure(error)

    def _handle_response(self, response: httpx.Response) -> ApiResponse:
        if response.is_error:
            raise ErrorClassifier.classify_response(response)

        if not response.content:
            return ApiResponse(success=True, data=None, error=None)

        try:
            body = response.json()
        except ValueError as exc:
            raise UnknownError(
                "The ParkHub service returned a response that is not valid JSON.",
                original_error=exc,
            ) from exc

        envelope = ApiResponse.from_body(body)
        if not envelope.success:
            body_error = envelope.error.model_dump() if envelope.error else None
            raise ErrorClassifier.from_api_error(body_error, response.status_code)
        return envelope

    def _on_error(self, error: AppError, api_key: str) -> None:
        if (
            self.config.clear_key_on_auth_error
            and isinstance(error, AuthenticationError)
            and error.status_code in (401, 403)
            and self._api_key == api_key
        ):
            self.logger.warning("Clearing API key after authentication failure")
            self.clear_api_key()
