#!/usr/bin/env python3
"""
Data models for OG Pilot requests and responses.
These classes give structure to the options and transport results.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Union

from multidict import CIMultiDict


IssuedAt = Union[int, float, date]


@dataclass
class CreateImageOptions:
    """Per-call options for create_image"""
    json: bool = False
    iat: Optional[IssuedAt] = None
    headers: Dict[str, str] = field(default_factory=dict)


class TransportResponse:
    """
    What a transport hands back to the client

    Headers are case-insensitive. Custom transports may subclass this and
    override text() to read the body lazily.
    """

    def __init__(self, status: int, headers=None, url: Optional[str] = None,
                 body=b"", encoding: str = "utf-8", body_error: Optional[BaseException] = None):
        self.status = status
        self.headers = CIMultiDict(headers or {})
        self.url = url
        self.body = body.encode(encoding) if isinstance(body, str) else body
        self.encoding = encoding
        self.body_error = body_error

    async def text(self) -> str:
        """Decode the response body, raising the stored error if it could not be read"""
        if self.body_error is not None:
            raise self.body_error
        return self.body.decode(self.encoding, errors="replace")

    def __repr__(self) -> str:
        return f"TransportResponse(status={self.status}, url={self.url!r})"
