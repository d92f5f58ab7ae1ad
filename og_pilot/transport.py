#!/usr/bin/env python3
import logging
from typing import Mapping, Optional

import aiohttp

from .config import Configuration
from .models import TransportResponse

logger = logging.getLogger(__name__)


def _seconds(milliseconds: Optional[float]) -> Optional[float]:
    if milliseconds is None:
        return None
    return milliseconds / 1000


async def aiohttp_transport(url: str, *, headers: Mapping[str, str], allow_redirects: bool,
                            config: Configuration) -> TransportResponse:
    """
    Default transport: one GET in a short-lived aiohttp session

    Args:
        url (str): Fully built request URL
        headers (Mapping): Request headers
        allow_redirects (bool): Whether aiohttp may follow 3xx responses
        config (Configuration): Supplies the connect and read timeouts

    Returns:
        TransportResponse: status, headers, final URL and body
    """
    timeout = aiohttp.ClientTimeout(
        total=None,
        sock_connect=_seconds(config.open_timeout_ms),
        sock_read=_seconds(config.read_timeout_ms),
    )
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url, headers=dict(headers), allow_redirects=allow_redirects) as response:
            body_error = None
            try:
                body = await response.read()
            except aiohttp.ClientError as e:
                # Status and headers are still usable; text() re-raises the read failure
                logger.warning(f"Could not read response body for status {response.status}: {str(e)}")
                body, body_error = b"", e
            logger.debug(f"aiohttp response {response.status} ({len(body)} bytes)")
            return TransportResponse(
                status=response.status,
                headers=response.headers,
                url=str(response.url),
                body=body,
                encoding=response.charset or "utf-8",
                body_error=body_error,
            )
