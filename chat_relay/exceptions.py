"""Exceptions raised by the chat relay."""

from __future__ import annotations

from typing import Optional


class RelayError(Exception):
    """Base class for relay errors."""


class ConfigurationError(RelayError):
    """Startup configuration is missing or invalid."""


class ValidationError(RelayError, ValueError):
    """The client request cannot be handled as sent."""


class UpstreamError(RelayError):
    """The generative API call failed or returned an unreadable body."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
