"""Custom exceptions for keepalive-prober.

Configuration errors are fatal and abort a run before any probe is sent.
Probe errors are per target: the prober converts them into failed
outcomes so a single unhealthy service never stops the run.
"""

from __future__ import annotations


class KeepAliveError(Exception):
    """Base exception for all keepalive-prober errors.
    
    All custom exceptions inherit from this class, allowing callers to
    catch all keepalive-specific errors with a single except clause.
    """
    pass


class ConfigurationError(KeepAliveError):
    """Raised when the target configuration cannot be loaded.
    
    This includes:
    - Missing configuration file or unset environment variable
    - Unparseable YAML/JSON text
    - Documents without a usable ``projects`` list
    - Entries that fail validation
    """
    pass


class ConfigNotFoundError(ConfigurationError):
    """Raised when the configured source does not exist or is empty."""
    pass


class ConfigParseError(ConfigurationError):
    """Raised when the configuration text is malformed or invalid."""
    pass


class ProbeError(KeepAliveError):
    """Raised during a single probe.
    
    Never escapes the prober; the message becomes the outcome's error.
    """
    pass


class MissingCredentialError(ProbeError):
    """Raised when a target requires an apikey and none is configured."""

    def __init__(self, message: str = "Missing apikey"):
        super().__init__(message)


class NetworkTimeoutError(ProbeError):
    """Raised when a request does not complete within its timeout."""

    def __init__(self, message: str = "Timeout"):
        super().__init__(message)


class ConnectionError(ProbeError):
    """Raised when a network connection fails."""
    pass
