"""Core layer: errors, ports and use cases."""

from .errors import CancellationError, ConfigurationError, CrptApiError, CrptError

__all__ = ["CrptError", "ConfigurationError", "CancellationError", "CrptApiError"]
