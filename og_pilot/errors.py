#!/usr/bin/env python3
"""Exceptions raised by the OG Pilot client."""

from typing import Optional


class OgPilotError(Exception):
    """Base class for all OG Pilot errors"""


class ConfigurationError(OgPilotError):
    """Raised when the client is missing something it needs before any I/O"""


class SigningUnavailableError(ConfigurationError):
    """Raised when no HMAC-SHA256 primitive is available in this environment"""


class ValidationError(OgPilotError, ValueError):
    """Raised when a required claim is missing or empty"""


class RequestError(OgPilotError):
    """Raised when the API call fails, either at the transport or HTTP level"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RequestTimeoutError(RequestError):
    """Raised when the combined open + read deadline elapses"""
