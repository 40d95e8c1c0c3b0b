"""Shared HTTP transport to the hosted backend.

This module provides the SupabaseHTTP class used by both the auth client and
the GraphQL client. It includes:

- A lazily created, pooled ``httpx.AsyncClient``
- ``apikey``/``Authorization`` header injection
- Circuit breaker pattern for fault tolerance
- Metrics collection for monitoring
- The error taxonomy shared by every backend-facing service
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from blog_stage.core.settings import settings

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_INTERNAL_SERVER_ERROR = 500


class BackendError(RuntimeError):
    """Base exception raised for hosted backend failures."""


class BackendUnavailableError(BackendError):
    """Raised on network failures, 5xx responses or an open circuit."""


class GraphQLError(BackendError):
    """Raised when a GraphQL response carries an ``errors`` array."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class AuthError(BackendError):
    """Raised when the hosted auth service rejects a request."""

    def __init__(self, message: str, status_code: int = 400, code: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class BackendMetrics:
    """Metrics collection for backend requests."""

    request_count: int = 0
    success_count: int = 0
    error_count: int = 0
    total_response_time: float = 0.0
    min_response_time: float = float("inf")
    max_response_time: float = 0.0
    error_counts_by_type: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    endpoint_counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_request(
        self, endpoint: str, response_time: float, success: bool, error_type: str | None = None
    ) -> None:
        """Record a request metric."""
        self.request_count += 1
        self.total_response_time += response_time
        self.min_response_time = min(self.min_response_time, response_time)
        self.max_response_time = max(self.max_response_time, response_time)
        self.endpoint_counts[endpoint] += 1

        if success:
            self.success_count += 1
        else:
            self.error_count += 1
            if error_type:
                self.error_counts_by_type[error_type] += 1

    def get_average_response_time(self) -> float:
        """Get average response time."""
        return self.total_response_time / self.request_count if self.request_count > 0 else 0.0

    def get_success_rate(self) -> float:
        """Get success rate as a percentage."""
        return (self.success_count / self.request_count * 100) if self.request_count > 0 else 0.0

    def snapshot(self) -> dict[str, Any]:
        """Return the metrics as a plain dictionary."""
        return {
            "request_count": self.request_count,
            "success_count": self.success_count,
            "error_count": self.error_count,
            "success_rate": self.get_success_rate(),
            "average_response_time": self.get_average_response_time(),
            "min_response_time": (
                self.min_response_time if self.min_response_time != float("inf") else 0.0
            ),
            "max_response_time": self.max_response_time,
            "error_counts_by_type": dict(self.error_counts_by_type),
            "endpoint_counts": dict(self.endpoint_counts),
        }


@dataclass
class CircuitBreaker:
    """Circuit breaker for backend operations."""

    failure_threshold: int = 5
    recovery_timeout: float = 60.0
    success_threshold: int = 3

    _state: CircuitState = CircuitState.CLOSED
    _failure_count: int = 0
    _success_count: int = 0
    _last_failure_time: float = 0.0

    def is_open(self) -> bool:
        """Check if circuit is open."""
        if self._state == CircuitState.OPEN:
            if time.time() - self._last_failure_time > self.recovery_timeout:
                self._state = CircuitState.HALF_OPEN
                self._success_count = 0
            return self._state == CircuitState.OPEN
        return False

    def record_success(self) -> None:
        """Record a successful operation."""
        if self._state == CircuitState.HALF_OPEN:
            self._success_count += 1
            if self._success_count >= self.success_threshold:
                self._state = CircuitState.CLOSED
                self._failure_count = 0
        elif self._state == CircuitState.CLOSED:
            self._failure_count = 0

    def record_failure(self) -> None:
        """Record a failed operation."""
        self._failure_count += 1
        self._last_failure_time = time.time()

        if self._state == CircuitState.HALF_OPEN or self._failure_count >= self.failure_threshold:
            self._state = CircuitState.OPEN

    def status(self) -> dict[str, Any]:
        """Return the circuit breaker state for health reporting."""
        return {
            "state": self._state.value,
            "failure_count": self._failure_count,
            "success_count": self._success_count,
            "last_failure_time": self._last_failure_time,
        }


@dataclass(frozen=True)
class BackendConfig:
    """Immutable configuration for backend HTTP operations."""

    base_url: str
    anon_key: str
    timeout_seconds: float
    failure_threshold: int
    recovery_timeout: float
    success_threshold: int


def load_backend_config() -> BackendConfig:
    """Build configuration object from global settings."""
    return BackendConfig(
        base_url=settings.supabase_url.rstrip("/"),
        anon_key=settings.supabase_anon_key,
        timeout_seconds=float(settings.http_timeout_seconds),
        failure_threshold=settings.circuit_failure_threshold,
        recovery_timeout=settings.circuit_recovery_seconds,
        success_threshold=settings.circuit_success_threshold,
    )


class SupabaseHTTP:
    """Pooled HTTP client for the hosted auth and GraphQL endpoints."""

    def __init__(
        self,
        config: BackendConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_backend_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()
        self._circuit_breaker = CircuitBreaker(
            failure_threshold=self.config.failure_threshold,
            recovery_timeout=self.config.recovery_timeout,
            success_threshold=self.config.success_threshold,
        )
        self._metrics = BackendMetrics()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    def _build_headers(
        self,
        access_token: str | None,
        extra: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        headers = {
            "apikey": self.config.anon_key,
            "Authorization": f"Bearer {access_token or self.config.anon_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_data: Any | None = None,
        params: Mapping[str, Any] | None = None,
        access_token: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and return the response.

        4xx responses are returned to the caller, which owns their meaning.

        Raises:
            BackendUnavailableError: On network failure, a 5xx response or an open circuit.
        """
        if self._circuit_breaker.is_open():
            raise BackendUnavailableError("Backend circuit breaker is open - service unavailable")

        client = await self._ensure_client()
        endpoint = f"{method} {path}"
        start_time = time.time()
        success = False
        error_type: str | None = None

        try:
            response = await client.request(
                method,
                path,
                json=json_data,
                params=params,
                headers=self._build_headers(access_token, headers),
            )
            if response.status_code >= HTTP_INTERNAL_SERVER_ERROR:
                self._circuit_breaker.record_failure()
                error_type = f"http_{response.status_code}"
                logger.warning("Backend %s responded with %s", endpoint, response.status_code)
                raise BackendUnavailableError(f"Backend responded with {response.status_code}")
            self._circuit_breaker.record_success()
            success = True
        except httpx.HTTPError as exc:
            self._circuit_breaker.record_failure()
            error_type = "network_error"
            logger.error("Backend request %s failed: %s", endpoint, exc)
            raise BackendUnavailableError(f"Backend request failed: {exc}") from exc
        finally:
            self._metrics.record_request(endpoint, time.time() - start_time, success, error_type)

        return response

    async def health_check(self) -> dict[str, Any]:
        """Check the hosted auth service and report transport health."""
        start_time = time.time()
        try:
            response = await self.request("GET", "/auth/v1/health")
        except BackendError as exc:
            return {
                "status": "error",
                "error": str(exc),
                "circuit_breaker": self._circuit_breaker.status(),
            }
        return {
            "status": "healthy" if response.status_code == HTTP_OK else "unhealthy",
            "response_time_ms": (time.time() - start_time) * 1000,
            "circuit_breaker": self._circuit_breaker.status(),
        }

    def get_metrics(self) -> dict[str, Any]:
        """Get backend request metrics."""
        return self._metrics.snapshot()

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _SupabaseHTTPSingleton:
    """Singleton wrapper for SupabaseHTTP."""

    _instance: SupabaseHTTP | None = None

    @classmethod
    def get_instance(cls) -> SupabaseHTTP:
        """Get or create the singleton SupabaseHTTP instance."""
        if cls._instance is None:
            cls._instance = SupabaseHTTP()
        return cls._instance


def get_supabase_http() -> SupabaseHTTP:
    """Return the process-wide backend transport."""
    return _SupabaseHTTPSingleton.get_instance()
