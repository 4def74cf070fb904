"""crpt_api package: app/core/infra/config.

Expose the rate limited API client at the package level.
"""

from .app.api import AppConfig, CrptApiClient
from .core.errors import CancellationError, ConfigurationError, CrptApiError, CrptError
from .infra.rate_limiter import FixedWindowRateLimiter
from .infra.schemas import Document, Product

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "CrptApiClient",
    "AppConfig",
    "FixedWindowRateLimiter",
    "Document",
    "Product",
    "CrptError",
    "ConfigurationError",
    "CancellationError",
    "CrptApiError",
]
