from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .urls import get_create_document_url


class AppConfig(BaseSettings):
    """Application configuration with automatic environment variable loading.

    All settings can be overridden via environment variables with the CRPT_API_ prefix.
    For example:
        - CRPT_API_REQUEST_LIMIT=5
        - CRPT_API_INTERVAL_SECONDS=60
        - CRPT_API_API_URL=https://markirovka.sandbox.crptech.ru/api/v3/lk/documents/create
        - CRPT_API_TIMEOUT_SECONDS=10

    Alternatively, settings can be provided programmatically when creating the client:
        client = CrptApiClient(interval_seconds=60, request_limit=5)
    """

    model_config = SettingsConfigDict(
        env_prefix="CRPT_API_",
        case_sensitive=False,
        extra="forbid",
    )

    api_url: str = Field(
        default_factory=get_create_document_url,
        description="Endpoint that accepts new documents",
    )

    request_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of requests issued per interval",
    )

    interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Length of the rate limiting window in seconds",
    )

    timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="HTTP timeout for a single request in seconds",
    )
