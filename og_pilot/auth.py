#!/usr/bin/env python3
import base64
import json
import logging
from typing import Any, Callable, Mapping, Optional

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, hmac

from .errors import ConfigurationError, SigningUnavailableError

logger = logging.getLogger(__name__)

JWT_HEADER = {"alg": "HS256", "typ": "JWT"}

KeyedHash = Callable[[bytes, bytes], bytes]


def base64url_encode(data: bytes) -> str:
    """Base64url encode bytes without '=' padding"""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _encode_json(value: Mapping[str, Any]) -> str:
    # Compact separators and insertion order, matching what the API side expects
    serialized = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return base64url_encode(serialized.encode("utf-8"))


def hmac_sha256(key: bytes, data: bytes) -> bytes:
    """
    Compute HMAC-SHA256 with the cryptography backend

    Raises:
        SigningUnavailableError: if the backend cannot do HMAC with SHA-256
    """
    backend = default_backend()
    if not backend.hmac_supported(hashes.SHA256()):
        raise SigningUnavailableError(
            "HMAC-SHA256 is not available; the cryptography backend does not support it."
        )

    mac = hmac.HMAC(key, hashes.SHA256())
    mac.update(data)
    return mac.finalize()


class TokenSigner:
    """Builds HS256-signed JWTs for the OG Pilot API"""

    def __init__(self, keyed_hash: Optional[KeyedHash] = None):
        """
        Initialize the signer with a keyed-hash primitive

        Args:
            keyed_hash (callable, optional): function (key, data) -> digest bytes.
                Defaults to HMAC-SHA256 from the cryptography package.
        """
        if keyed_hash is None:
            keyed_hash = hmac_sha256
        if not callable(keyed_hash):
            raise ConfigurationError("Keyed hash primitive must be callable")
        self.keyed_hash = keyed_hash

    def sign(self, claims: Mapping[str, Any], secret: str) -> str:
        """
        Sign a claims mapping into a compact JWT

        Args:
            claims (Mapping): Claims to embed; key order is preserved
            secret (str): Shared API key used as the HMAC key

        Returns:
            str: header.claims.signature, each segment base64url without padding
        """
        if not secret:
            raise ConfigurationError("OG Pilot API key is missing")

        signing_input = f"{_encode_json(JWT_HEADER)}.{_encode_json(claims)}"
        signature = self.keyed_hash(secret.encode("utf-8"), signing_input.encode("ascii"))
        token = f"{signing_input}.{base64url_encode(signature)}"

        logger.debug(f"Signed token with claims {sorted(claims)}: {mask_token(token)}")
        return token


def mask_token(token: str) -> str:
    """Show only the first 10 characters of a token for logging"""
    if len(token) <= 10:
        return "***"
    return f"{token[:10]}..."


def sign_jwt(claims: Mapping[str, Any], secret: str, keyed_hash: Optional[KeyedHash] = None) -> str:
    """Convenience wrapper around TokenSigner.sign"""
    return TokenSigner(keyed_hash).sign(claims, secret)
