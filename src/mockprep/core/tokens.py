"""Signed, time-boxed envelopes for interview invitations.

A token is ``<envelope>.<signature>``, both parts base64url without padding.
The envelope is canonical JSON ``{"payload": ..., "iat": ..., "exp": ...}`` and
the signature covers the encoded envelope segment exactly as transmitted, so
any change to either segment fails verification. ``iat`` is whole seconds;
``exp`` keeps the exact expiry instant so a token never lapses before its TTL.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from mockprep.config import Settings, get_settings
from mockprep.errors import TokenVerificationError

logger = logging.getLogger(__name__)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode((segment + padding).encode("ascii"))


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Signer(ABC):
    @abstractmethod
    def sign(self, data: bytes) -> bytes:
        """Return the signature for ``data``."""


class HMACSigner(Signer):
    def __init__(self, secret: str | bytes):
        key = secret.encode("utf-8") if isinstance(secret, str) else secret
        if not key:
            raise ValueError("HMAC secret must not be empty")
        self._key = key

    def sign(self, data: bytes) -> bytes:
        return hmac.new(self._key, data, hashlib.sha256).digest()


class TokenIssuer:
    def __init__(self, signer: Signer, *, clock: Callable[[], datetime] = _utcnow):
        self.signer = signer
        self.clock = clock

    def issue(self, payload: dict[str, Any], ttl: timedelta) -> str:
        if ttl <= timedelta(0):
            raise ValueError("token ttl must be positive")

        issued_at = self.clock()
        envelope = {
            "payload": payload,
            "iat": int(issued_at.timestamp()),
            "exp": (issued_at + ttl).timestamp(),
        }
        body = json.dumps(envelope, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
        encoded = _b64encode(body.encode("utf-8"))
        signature = _b64encode(self.signer.sign(encoded.encode("ascii")))
        return f"{encoded}.{signature}"

    def verify(self, token: str) -> dict[str, Any]:
        encoded, separator, signature = token.partition(".")
        if not separator or not encoded or not signature or "." in signature:
            raise TokenVerificationError("invalid_signature")

        try:
            expected = _b64encode(self.signer.sign(encoded.encode("ascii")))
        except UnicodeEncodeError as exc:
            raise TokenVerificationError("invalid_signature") from exc
        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
            raise TokenVerificationError("invalid_signature")

        try:
            envelope = json.loads(_b64decode(encoded))
            payload = envelope["payload"]
            expires_at = float(envelope["exp"])
        except (binascii.Error, ValueError, KeyError, TypeError) as exc:
            logger.warning("Signed token carried an unreadable envelope: %s", exc)
            raise TokenVerificationError("invalid_signature") from exc

        if self.clock().timestamp() >= expires_at:
            raise TokenVerificationError("expired")
        return payload


def build_token_issuer(settings: Settings | None = None) -> TokenIssuer:
    settings = settings or get_settings()
    return TokenIssuer(HMACSigner(settings.secret_key))
