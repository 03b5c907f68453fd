"""
Structured logging for the ParkHub client.

Every component logs through ``ParkHubLogger`` so records share the
``[component=... key=value] message`` shape and carry a request id.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Optional


class ParkHubLogger:
    """Structured logger for one client component."""

    def __init__(self, component: str):
        """
        Initialize logger for a component.

        Args:
            component: Component name (e.g., "client", "batch")
        """
        self.component = component
        self.logger = logging.getLogger(f"parkhub_passes.{component}")

    def _format_message(self, message: str, **kwargs) -> str:
        fields = [f"component={self.component}"]
        for key, value in kwargs.items():
            if value is not None:
                fields.append(f"{key}={value}")
        return f"[{' '.join(fields)}] {message}"

    def debug(self, message: str, request_id: Optional[str] = None, **kwargs):
        self.logger.debug(self._format_message(message, request_id=request_id, **kwargs))

    def info(self, message: str, request_id: Optional[str] = None, **kwargs):
        self.logger.info(self._format_message(message, request_id=request_id, **kwargs))

    def warning(self, message: str, request_id: Optional[str] = None, **kwargs):
        self.logger.warning(self._format_message(message, request_id=request_id, **kwargs))

    def error(self, message: str, request_id: Optional[str] = None,
              error: Optional[BaseException] = None, **kwargs):
        """Log error message; ``error`` adds its type and code when classified."""
        if error is not None:
            kwargs['error_type'] = type(error).__name__
            code = getattr(error, 'code', None)
            kwargs['error_code'] = getattr(code, 'value', code)
        self.logger.error(self._format_message(message, request_id=request_id, **kwargs))

    @contextmanager
    def track_request(self, method: str, path: str, request_id: Optional[str] = None):
        """
        Track timing of one logical API call.

        Args:
            method: HTTP method
            path: Request path
            request_id: Optional request ID (generated if not provided)

        Yields:
            Dict with request metadata including request_id
        """
        if request_id is None:
            request_id = str(uuid.uuid4())[:8]

        start_time = time.time()
        self.debug(f"Starting {method} {path}", request_id=request_id, method=method)

        metadata = {
            'request_id': request_id,
            'method': method,
            'path': path,
            'start_time': start_time,
        }

        try:
            yield metadata
            duration = time.time() - start_time
            self.info(
                f"Completed {method} {path}",
                request_id=request_id,
                method=method,
                status=metadata.get('status'),
                duration_ms=int(duration * 1000)
            )
        except Exception as e:
            duration = time.time() - start_time
            self.error(
                f"Failed {method} {path}",
                request_id=request_id,
                method=method,
                duration_ms=int(duration * 1000),
                error=e
            )
            raise

    def log_batch_summary(self, event_id: Optional[str], total_success: int,
                          total_failed: int, duration: float):
        """Log the outcome of a batch run."""
        self.info(
            "Batch settled",
            event_id=event_id,
            succeeded=total_success,
            failed=total_failed,
            duration_ms=int(duration * 1000)
        )
