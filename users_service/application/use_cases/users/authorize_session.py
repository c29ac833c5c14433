# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for resolving an opaque session token into its signed assertion."""

from __future__ import annotations

import re

from users_service.application.services.session_issuer import session_cache_key
from users_service.domain.users.exceptions import CacheUnavailableError, UnauthorizedError
from users_service.domain.users.repositories import SessionCache
from users_service.shared.logging import logger

BEARER_PREFIX = "Bearer "
_TOKEN_RE = re.compile(r"[0-9a-f]{16,128}")


def parse_bearer(header: str | None) -> str | None:
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):]
    return token or None


class AuthorizeSessionUseCase:
    def __init__(self, *, cache: SessionCache) -> None:
        self._cache = cache

    def execute(self, token: str | None) -> str:
        if not token or not _TOKEN_RE.fullmatch(token):
            raise UnauthorizedError()

        try:
            assertion = self._cache.get(session_cache_key(token))
        except CacheUnavailableError as exc:
            logger.warning("users.authorize: cache unavailable, rejecting")
            raise UnauthorizedError() from exc

        if not assertion:
            raise UnauthorizedError()
        return assertion
