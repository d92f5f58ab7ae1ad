"""
OG Pilot API Client Package

This package signs image requests for the OG Pilot API and returns the
generated image URL or the JSON description of the image.
"""

from typing import Any, Callable, Mapping, Optional

from .auth import TokenSigner, sign_jwt
from .client import Client, normalize_iat
from .config import Configuration
from .errors import (
    ConfigurationError,
    OgPilotError,
    RequestError,
    RequestTimeoutError,
    SigningUnavailableError,
    ValidationError,
)
from .models import CreateImageOptions, TransportResponse
from .request_context import (
    clear_current_request,
    get_current_path,
    request_context,
    set_current_request,
)

_default_config: Optional[Configuration] = None


def get_config() -> Configuration:
    """Return the shared configuration, creating it on first use"""
    global _default_config
    if _default_config is None:
        _default_config = Configuration()
    return _default_config


def configure(updater: Optional[Callable[[Configuration], Any]] = None, **changes: Any) -> Configuration:
    """
    Update the shared configuration in place

    Either pass a function that mutates the configuration, or keyword changes:
        configure(lambda c: setattr(c, "api_key", "..."))
        configure(api_key="...", domain="example.com")
    """
    config = get_config()
    if updater is not None:
        updater(config)
    if changes:
        config.update(**changes)
    return config


def reset_config() -> None:
    """Replace the shared configuration; clients built earlier keep the old one"""
    global _default_config
    _default_config = Configuration()


def client() -> Client:
    """Client bound to the shared configuration"""
    return Client(get_config())


def create_client(config: Optional[Mapping[str, Any]] = None, **options: Any) -> Client:
    """Client with its own configuration, independent of the shared one"""
    if isinstance(config, Configuration):
        return Client(config, **options)
    return Client(Configuration(**{**dict(config or {}), **options}))


async def create_image(params: Optional[Mapping[str, Any]] = None, **options: Any) -> Any:
    """Shortcut for client().create_image(...)"""
    return await client().create_image(params, **options)


__all__ = [
    'Client',
    'Configuration',
    'ConfigurationError',
    'CreateImageOptions',
    'OgPilotError',
    'RequestError',
    'RequestTimeoutError',
    'SigningUnavailableError',
    'TokenSigner',
    'TransportResponse',
    'ValidationError',
    'clear_current_request',
    'client',
    'configure',
    'create_client',
    'create_image',
    'get_config',
    'get_current_path',
    'normalize_iat',
    'request_context',
    'reset_config',
    'set_current_request',
    'sign_jwt',
]
