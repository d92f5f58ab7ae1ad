"""
Unit tests for the JWT signer.
"""

import base64
import hashlib
import hmac
import json

import pytest

from og_pilot.auth import TokenSigner, base64url_encode, hmac_sha256, sign_jwt
from og_pilot.errors import ConfigurationError, SigningUnavailableError


def _decode_segment(segment):
    return json.loads(base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4)))


class TestSignJwt:
    """Test cases for sign_jwt."""

    def test_known_token(self):
        """Matches the reference HS256 token for the same header, claims and key."""
        claims = {"sub": "1234567890", "name": "John Doe", "iat": 1516239022}

        token = sign_jwt(claims, "your-256-bit-secret")

        assert token == (
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
            ".eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyfQ"
            ".SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
        )

    def test_three_unpadded_segments(self):
        token = sign_jwt({"title": "Hello", "iss": "example.com", "sub": "sk_test_"}, "secret")

        segments = token.split(".")
        assert len(segments) == 3
        assert all("=" not in s and "+" not in s and "/" not in s for s in segments)
        assert _decode_segment(segments[0]) == {"alg": "HS256", "typ": "JWT"}
        assert _decode_segment(segments[1]) == {"title": "Hello", "iss": "example.com", "sub": "sk_test_"}

    def test_signature_is_hmac_sha256_of_signing_input(self):
        token = sign_jwt({"title": "Hello"}, "secret")
        signing_input, _, signature = token.rpartition(".")

        expected = hmac.new(b"secret", signing_input.encode("ascii"), hashlib.sha256).digest()
        assert signature == base64url_encode(expected)

    def test_deterministic(self):
        claims = {"title": "Hello", "template": "blog", "iat": 1700000000}

        assert sign_jwt(claims, "secret") == sign_jwt(dict(claims), "secret")

    def test_key_order_changes_token(self):
        first = sign_jwt({"a": 1, "b": 2}, "secret")
        second = sign_jwt({"b": 2, "a": 1}, "secret")

        assert first != second

    def test_non_ascii_claims(self):
        token = sign_jwt({"title": "Café ☕"}, "secret")

        assert _decode_segment(token.split(".")[1]) == {"title": "Café ☕"}

    def test_missing_secret(self):
        with pytest.raises(ConfigurationError):
            sign_jwt({"title": "Hello"}, "")


class TestTokenSigner:
    """Test cases for TokenSigner keyed-hash injection."""

    def test_injected_keyed_hash_is_used(self):
        seen = []

        def fake_hash(key, data):
            seen.append((key, data))
            return b"\xff\xfe"

        token = TokenSigner(fake_hash).sign({"title": "Hello"}, "secret")

        assert token.endswith(".__4")
        assert seen[0][0] == b"secret"
        assert seen[0][1] == token.rpartition(".")[0].encode("ascii")

    def test_non_callable_keyed_hash(self):
        with pytest.raises(ConfigurationError):
            TokenSigner("sha256")

    def test_unavailable_primitive(self, monkeypatch):
        class NoHmacBackend:
            def hmac_supported(self, algorithm):
                return False

        monkeypatch.setattr("og_pilot.auth.default_backend", lambda: NoHmacBackend())

        with pytest.raises(SigningUnavailableError):
            hmac_sha256(b"secret", b"data")

    def test_default_hmac_matches_stdlib(self):
        assert hmac_sha256(b"key", b"data") == hmac.new(b"key", b"data", hashlib.sha256).digest()
