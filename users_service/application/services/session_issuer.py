# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Session issuance: a signed assertion stored behind an opaque token."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from users_service.domain.users.entities import SessionGrant
from users_service.domain.users.exceptions import SigningFailureError
from users_service.domain.users.repositories import SessionCache, SessionIssuer
from users_service.shared.logging import logger

TOKEN_BYTES = 24
SESSION_TTL = timedelta(days=7)
SIGNING_ALGORITHM = "HS256"
_CACHE_PREFIX = "token:"


def session_cache_key(token: str) -> str:
    return f"{_CACHE_PREFIX}{token}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtSessionIssuer(SessionIssuer):
    """Mint an HS256 assertion and park it in the cache under a random token.

    The opaque token is independent from the assertion, so evicting the cache
    entry ends the session even though the assertion itself stays valid
    until its ``exp`` claim.
    """

    def __init__(
        self,
        *,
        cache: SessionCache,
        signing_key: str,
        issuer: str,
        ttl: timedelta = SESSION_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._cache = cache
        self._signing_key = signing_key
        self._issuer = issuer
        self._ttl = ttl
        self._clock = clock

    def sign(self, user_id: str) -> str:
        issued_at = self._clock()
        claims = {
            "iss": self._issuer,
            "sub": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
            "jti": secrets.token_hex(8),
        }
        try:
            return jwt.encode(claims, self._signing_key, algorithm=SIGNING_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.error(f"session_issuer: signing failed ({type(exc).__name__})")
            raise SigningFailureError() from exc

    def issue(self, user_id: str) -> SessionGrant:
        assertion = self.sign(user_id)
        token = secrets.token_hex(TOKEN_BYTES)
        self._cache.put(session_cache_key(token), assertion, self._ttl)
        logger.debug(f"session_issuer: issued session user_id={user_id}")
        return SessionGrant(token=token, assertion=assertion)


__all__ = ["JwtSessionIssuer", "SESSION_TTL", "TOKEN_BYTES", "session_cache_key"]
