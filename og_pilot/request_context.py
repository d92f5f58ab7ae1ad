#!/usr/bin/env python3
"""
Request context for automatic path resolution.

Stores the current request per execution context with contextvars, so
concurrent asyncio tasks and threads each see their own request. The client
never reads this; callers resolve the path and pass it in as the `path` claim.
"""

import os
import posixpath
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from .config import Configuration


@dataclass(frozen=True)
class RequestInfo:
    """The bits of an incoming request needed to resolve its path"""
    url: Optional[str] = None
    path: Optional[str] = None


_current_request: ContextVar[Optional[RequestInfo]] = ContextVar("og_pilot_current_request", default=None)


def set_current_request(url: Optional[str] = None, path: Optional[str] = None) -> None:
    """Set the current request for this context; pair with clear_current_request()"""
    _current_request.set(RequestInfo(url=url, path=path))


def clear_current_request() -> None:
    _current_request.set(None)


def get_current_request() -> Optional[RequestInfo]:
    return _current_request.get()


@contextmanager
def request_context(url: Optional[str] = None, path: Optional[str] = None) -> Iterator[RequestInfo]:
    """
    Run a block with the given request as current, restoring the previous one after

    Example:
        with request_context(url=request.url):
            image_url = await og_pilot.create_image({"title": "Hello", "path": get_current_path()})
    """
    info = RequestInfo(url=url, path=path)
    token = _current_request.set(info)
    try:
        yield info
    finally:
        _current_request.reset(token)


def get_current_path(strip_extensions: Optional[bool] = None,
                     config: Optional["Configuration"] = None) -> Optional[str]:
    """
    Resolve the current request path, falling back to CGI-style environment variables

    Args:
        strip_extensions (bool, optional): Drop a trailing file extension such as ".html".
            When omitted, config.strip_extensions decides; without a config nothing is stripped.
        config (Configuration, optional): Client configuration to take strip_extensions from

    Returns:
        str or None: path with query string, if any can be found
    """
    if strip_extensions is None:
        strip_extensions = config.strip_extensions if config is not None else False

    request = get_current_request()

    if request is not None and request.path:
        path = request.path
    elif request is not None and request.url:
        path = _path_from_url(request.url)
    else:
        path = _path_from_env()

    if path and strip_extensions:
        return strip_extension(path)
    return path


def strip_extension(path: str) -> str:
    """Remove the file extension of the last path segment, keeping any query string"""
    base, sep, query = path.partition("?")
    root, ext = posixpath.splitext(base)
    if ext:
        base = root
    return f"{base}{sep}{query}"


def _path_from_url(url: str) -> str:
    if not url.startswith(("http://", "https://")):
        return url
    parts = urlsplit(url)
    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


def _path_from_env() -> Optional[str]:
    for name in ("REQUEST_URI", "ORIGINAL_FULLPATH"):
        value = os.getenv(name)
        if value:
            return value

    path_info = os.getenv("PATH_INFO")
    if path_info:
        query = os.getenv("QUERY_STRING", "")
        return f"{path_info}?{query}" if query else path_info

    return os.getenv("REQUEST_PATH") or None
