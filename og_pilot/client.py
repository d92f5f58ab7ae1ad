#!/usr/bin/env python3
import asyncio
import logging
import math
from datetime import date, datetime, timezone
from json import loads as parse_json
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode, urljoin

from .auth import TokenSigner, mask_token
from .config import Configuration
from .errors import ConfigurationError, RequestError, RequestTimeoutError, ValidationError
from .models import CreateImageOptions, IssuedAt, TransportResponse
from .transport import aiohttp_transport

logger = logging.getLogger(__name__)

ENDPOINT_PATH = "/api/v1/images"

# Numeric iat values above this are treated as milliseconds
MILLISECONDS_THRESHOLD = 100_000_000_000


def normalize_iat(iat: IssuedAt) -> int:
    """
    Convert an issued-at value to whole Unix seconds

    Args:
        iat: datetime/date, or a number in seconds or milliseconds

    Returns:
        int: seconds since the epoch
    """
    if isinstance(iat, datetime):
        if iat.tzinfo is None:
            iat = iat.replace(tzinfo=timezone.utc)
        return math.floor(iat.timestamp() * 1000) // 1000
    if isinstance(iat, date):
        return normalize_iat(datetime(iat.year, iat.month, iat.day, tzinfo=timezone.utc))
    if isinstance(iat, bool) or not isinstance(iat, (int, float)):
        raise ValidationError(f"OG Pilot iat must be a number or a date, got {type(iat).__name__}")
    if not math.isfinite(iat):
        raise ValidationError(f"OG Pilot iat must be finite, got {iat}")

    if iat > MILLISECONDS_THRESHOLD:
        return math.floor(iat / 1000)
    return math.floor(iat)


def _is_blank(value: Any) -> bool:
    return value is None or len(str(value)) == 0


class Client:
    """Client for the OG Pilot image API"""

    def __init__(self, config: Union[Configuration, Mapping[str, Any], None] = None,
                 signer: Optional[TokenSigner] = None, **options):
        """
        Initialize the client

        Args:
            config (Configuration or Mapping, optional): Configuration to bind to.
                A Configuration instance is used as-is (not copied); a mapping or
                keyword options build a new one.
            signer (TokenSigner, optional): Signer with a custom keyed-hash primitive
        """
        if isinstance(config, Configuration):
            if options:
                raise TypeError("Pass either a Configuration or keyword options, not both")
            self.config = config
        else:
            self.config = Configuration(**{**dict(config or {}), **options})
        self.signer = signer or TokenSigner()

    async def create_image(self, params: Optional[Mapping[str, Any]] = None, *,
                           json: bool = False, iat: Optional[IssuedAt] = None,
                           headers: Optional[Mapping[str, str]] = None,
                           options: Optional[CreateImageOptions] = None) -> Any:
        """
        Request an image

        Args:
            params (Mapping): Claims such as title, template, path
            json (bool): Ask for a JSON body instead of the image location
            iat (int, float or date, optional): Issued-at, used by the API as a cache key
            headers (Mapping, optional): Extra request headers
            options (CreateImageOptions, optional): Alternative to the keyword options

        Returns:
            str or Any: the image URL, or the parsed JSON body when json=True
        """
        if options is not None:
            if json or iat is not None or headers is not None:
                raise TypeError("Pass either options or json/iat/headers keywords, not both")
            json, iat, headers = options.json, options.iat, options.headers

        url = self.build_url(params or {}, iat)
        response = await self._request(url, json, headers or {})

        if json:
            try:
                body = await response.text()
            except Exception as e:
                logger.error(f"Could not read response body: {str(e)}")
                raise RequestError(f"OG Pilot request failed: {str(e)}", status=response.status) from e
            return parse_json(body)

        location = response.headers.get("Location")
        if location is not None:
            return location
        if response.url is not None:
            return response.url
        return url

    def build_url(self, params: Mapping[str, Any], iat: Optional[IssuedAt] = None) -> str:
        """Build the signed request URL; token is the only query parameter"""
        payload = self.build_payload(params, iat)
        token = self.signer.sign(payload, self._api_key())
        return f"{urljoin(self.config.base_url, ENDPOINT_PATH)}?{urlencode({'token': token})}"

    def build_payload(self, params: Mapping[str, Any], iat: Optional[IssuedAt] = None) -> Dict[str, Any]:
        """Merge caller params with configuration defaults and validate the result"""
        payload = dict(params)

        if iat is not None:
            payload["iat"] = normalize_iat(iat)

        if _is_blank(payload.get("iss")):
            payload["iss"] = self._domain()

        if _is_blank(payload.get("sub")):
            payload["sub"] = self._api_key_prefix()

        self._validate_payload(payload)
        return payload

    def _validate_payload(self, payload: Mapping[str, Any]) -> None:
        if _is_blank(payload.get("iss")):
            raise ConfigurationError("OG Pilot domain is missing")

        if _is_blank(payload.get("sub")):
            raise ConfigurationError("OG Pilot API key prefix is missing")

        if _is_blank(payload.get("title")):
            raise ValidationError("OG Pilot title is required")

    def _api_key(self) -> str:
        if not self.config.api_key:
            raise ConfigurationError("OG Pilot API key is missing")
        return self.config.api_key

    def _domain(self) -> str:
        if not self.config.domain:
            raise ConfigurationError("OG Pilot domain is missing")
        return self.config.domain

    def _api_key_prefix(self) -> str:
        return self._api_key()[:8]

    def _transport(self):
        transport = self.config.transport
        if transport is None:
            return aiohttp_transport
        if not callable(transport):
            raise ConfigurationError(
                "OG Pilot transport is not callable; provide an async transport function in the configuration."
            )
        return transport

    async def _request(self, url: str, json: bool, headers: Mapping[str, str]) -> TransportResponse:
        """
        Execute the GET under the combined deadline and classify failures

        Redirects are not followed so the Location header stays observable.
        """
        transport = self._transport()

        request_headers: Dict[str, str] = {}
        if json:
            request_headers["Accept"] = "application/json"
        request_headers.update(headers)

        timeout_ms = self.config.total_timeout_ms()
        deadline = timeout_ms / 1000 if timeout_ms and timeout_ms > 0 else None

        logger.debug(f"Making GET request to {_mask_url(url)} (deadline: {deadline}s)")

        try:
            call = transport(url, headers=request_headers, allow_redirects=False, config=self.config)
            # wait_for cancels the transport coroutine once the deadline passes
            response = await asyncio.wait_for(call, timeout=deadline)

            logger.debug(f"Response status: {response.status}")

            if response.status >= 400:
                body = await _read_text_quietly(response)
                logger.warning(f"OG Pilot returned {response.status}: {body[:500]}")
                raise RequestError(
                    f"OG Pilot request failed with status {response.status}: {body}",
                    status=response.status,
                )

            return response
        except RequestError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"OG Pilot request timed out after {deadline}s")
            raise RequestTimeoutError(f"OG Pilot request timed out after {timeout_ms} ms") from e
        except Exception as e:
            logger.error(f"Request error: {str(e)}")
            raise RequestError(f"OG Pilot request failed: {str(e)}") from e


async def _read_text_quietly(response: TransportResponse) -> str:
    try:
        return await response.text()
    except Exception:
        return ""


def _mask_url(url: str) -> str:
    base, _, token = url.partition("?token=")
    if not token:
        return url
    return f"{base}?token={mask_token(token)}"
