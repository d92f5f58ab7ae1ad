import asyncio

import pytest

import og_pilot
from og_pilot import Configuration, TransportResponse


class StubTransport:
    """Records calls and returns a canned response, or hangs until cancelled."""

    def __init__(self, response=None, hang=False, error=None):
        self.response = response
        self.hang = hang
        self.error = error
        self.calls = []
        self.aborted = False

    @property
    def called(self):
        return bool(self.calls)

    async def __call__(self, url, *, headers, allow_redirects, config):
        self.calls.append({"url": url, "headers": dict(headers), "allow_redirects": allow_redirects})
        if self.error is not None:
            raise self.error
        if self.hang:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.aborted = True
                raise
        return self.response


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep OG Pilot env vars and the shared configuration out of every test."""
    for name in ("OG_PILOT_API_KEY", "OG_PILOT_DOMAIN", "REQUEST_URI", "ORIGINAL_FULLPATH",
                 "PATH_INFO", "QUERY_STRING", "REQUEST_PATH"):
        monkeypatch.delenv(name, raising=False)
    og_pilot.reset_config()
    yield
    og_pilot.reset_config()


@pytest.fixture
def redirect_transport():
    return StubTransport(TransportResponse(302, headers={"Location": "https://example.com/img.png"}))


@pytest.fixture
def make_config():
    def _make(transport=None, **overrides):
        options = {"api_key": "sk_test_1234567890", "domain": "example.com", "transport": transport}
        options.update(overrides)
        return Configuration(**options)
    return _make
