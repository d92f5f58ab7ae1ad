#!/usr/bin/env python3
import os
from typing import Any, Awaitable, Callable, Optional

from dotenv import load_dotenv


# Load environment variables from .env file if it exists
load_dotenv()

DEFAULT_BASE_URL = "https://ogpilot.com"
DEFAULT_OPEN_TIMEOUT_MS = 5000
DEFAULT_READ_TIMEOUT_MS = 10000

API_KEY_ENV = "OG_PILOT_API_KEY"
DOMAIN_ENV = "OG_PILOT_DOMAIN"

Transport = Callable[..., Awaitable[Any]]

# Distinguishes "not supplied" from an explicit None (no timeout)
_UNSET: Any = object()

_FIELDS = (
    "api_key",
    "domain",
    "base_url",
    "open_timeout_ms",
    "read_timeout_ms",
    "transport",
    "strip_extensions",
)


class Configuration:
    """Settings for the OG Pilot client"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        domain: Optional[str] = None,
        base_url: Optional[str] = None,
        open_timeout_ms: Optional[float] = _UNSET,
        read_timeout_ms: Optional[float] = _UNSET,
        transport: Optional[Transport] = None,
        strip_extensions: Optional[bool] = None,
    ):
        """
        Build a configuration; every field falls back to a default independently

        Args:
            api_key (str, optional): API key, defaults to $OG_PILOT_API_KEY
            domain (str, optional): Issuer domain, defaults to $OG_PILOT_DOMAIN
            base_url (str, optional): API origin, defaults to https://ogpilot.com
            open_timeout_ms (float, optional): Connect timeout, 5000 ms unless given; None disables it
            read_timeout_ms (float, optional): Read timeout, 10000 ms unless given; None disables it
            transport (callable, optional): Async transport replacing the aiohttp default
            strip_extensions (bool, optional): Strip file extensions from resolved paths, default True
        """
        self.api_key = api_key if api_key is not None else os.getenv(API_KEY_ENV)
        self.domain = domain if domain is not None else os.getenv(DOMAIN_ENV)
        self.base_url = base_url if base_url is not None else DEFAULT_BASE_URL
        self.open_timeout_ms = DEFAULT_OPEN_TIMEOUT_MS if open_timeout_ms is _UNSET else open_timeout_ms
        self.read_timeout_ms = DEFAULT_READ_TIMEOUT_MS if read_timeout_ms is _UNSET else read_timeout_ms
        self.transport = transport
        self.strip_extensions = True if strip_extensions is None else strip_extensions

    @classmethod
    def from_env(cls) -> "Configuration":
        """Create a configuration purely from environment variables and defaults"""
        return cls()

    def update(self, **changes: Any) -> "Configuration":
        """Apply keyword changes in place and return self"""
        unknown = set(changes) - set(_FIELDS)
        if unknown:
            raise TypeError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            setattr(self, name, value)
        return self

    def copy(self) -> "Configuration":
        """Return an independent configuration with the same values"""
        return Configuration(**{name: getattr(self, name) for name in _FIELDS})

    def total_timeout_ms(self) -> Optional[float]:
        """
        Combined deadline for one request

        Returns None only when both timeouts are disabled; a missing component counts as 0.
        """
        if self.open_timeout_ms is None and self.read_timeout_ms is None:
            return None
        return (self.open_timeout_ms or 0) + (self.read_timeout_ms or 0)

    def __repr__(self) -> str:
        api_key = f"{self.api_key[:4]}..." if self.api_key else None
        return (
            f"Configuration(api_key={api_key!r}, domain={self.domain!r}, base_url={self.base_url!r}, "
            f"open_timeout_ms={self.open_timeout_ms!r}, read_timeout_ms={self.read_timeout_ms!r}, "
            f"transport={self.transport!r}, strip_extensions={self.strip_extensions!r})"
        )
