from __future__ import annotations

from pydantic import ValidationError

from .container import Container
from ..config.settings import AppConfig
from ..core.errors import CancellationError, ConfigurationError
from ..infra.rate_limiter import FixedWindowRateLimiter
from ..infra.schemas import Document


class CrptApiClient:
    """Thread-safe client for the CRPT document API.

    All calls made through one client share a single fixed-window rate limit:
    at most ``request_limit`` documents are submitted per ``interval_seconds``.
    Calls beyond the limit block until the next window instead of failing.

    Example:
        # 2 requests per second, other settings from environment
        with CrptApiClient(interval_seconds=1.0, request_limit=2) as client:
            client.create_document(document, signature="...")

        # Safe to share between threads
        with CrptApiClient(interval_seconds=60, request_limit=100) as client:
            with ThreadPoolExecutor(8) as pool:
                list(pool.map(lambda d: client.create_document(d, sig), documents))
    """

    def __init__(
        self,
        interval_seconds: float | None = None,
        request_limit: int | None = None,
        *,
        api_url: str | None = None,
        timeout_seconds: float | None = None,
    ):
        """Initialize the client and start its rate limiter.

        Args:
            interval_seconds: Length of the rate limiting window.
                             If None, uses CRPT_API_INTERVAL_SECONDS or default (1.0).
            request_limit: Maximum requests per window.
                          If None, uses CRPT_API_REQUEST_LIMIT or default (10).
            api_url: Optional endpoint override. If None, uses CRPT_API_API_URL or the production URL.
            timeout_seconds: Optional HTTP timeout. If None, uses CRPT_API_TIMEOUT_SECONDS or default (20).

        Raises:
            ConfigurationError: If any setting is invalid (e.g. non-positive limit or interval).
        """
        self._container = Container()

        # Build config dict with only provided values
        config_dict: dict[str, object] = {}
        if interval_seconds is not None:
            config_dict["interval_seconds"] = interval_seconds
        if request_limit is not None:
            config_dict["request_limit"] = request_limit
        if api_url is not None:
            config_dict["api_url"] = api_url
        if timeout_seconds is not None:
            config_dict["timeout_seconds"] = timeout_seconds

        try:
            config = AppConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
        self._container.config.from_pydantic(config)

        self._container.init_resources()
        self._rate_limiter: FixedWindowRateLimiter = self._container.rate_limiter()
        self._create_document_uc = self._container.create_document_uc()
        self._closed = False

    @property
    def rate_limiter(self) -> FixedWindowRateLimiter:
        self._ensure_open()
        return self._rate_limiter

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        # Resources would be re-created on demand after shutdown
        if self._closed:
            raise CancellationError("client is closed")

    def create_document(self, document: Document, signature: str) -> dict:
        """Submit a document for goods introduction.

        Blocks while the rate limit for the current window is exhausted.

        Args:
            document: Document to submit.
            signature: Signature sent in the ``Signature`` header.

        Returns:
            Decoded JSON response body (empty dict for an empty body).

        Raises:
            CancellationError: If the client is closed, or was closed while waiting for capacity.
            CrptApiError: If the API rejected the request or the transport failed.
        """
        self._ensure_open()
        return self._create_document_uc.execute(document, signature)

    def close(self) -> None:
        """Stop the rate limiter, cancel blocked callers and close the HTTP client.

        The limiter is closed first so that no caller is granted a permit once the
        HTTP client starts shutting down. Calling it again is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        self._rate_limiter.close()
        self._container.shutdown_resources()

    def __enter__(self) -> CrptApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "CrptApiClient",
    "AppConfig",
]
