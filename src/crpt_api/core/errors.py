from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CrptError(Exception):
    """Base class for all crpt_api errors."""


class ConfigurationError(CrptError, ValueError):
    """Invalid limiter or client settings. Never retried."""


class CancellationError(CrptError):
    """A wait in ``acquire`` was abandoned (timeout or shutdown) without consuming capacity."""


class CrptApiError(CrptError):
    """The document submission failed after capacity was consumed.

    The error is logged where it is raised so that failures show up even when
    the caller only retries.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text
        logger.error(message)
