# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from users_service.domain.users.exceptions import HashingFailureError, MalformedDigestError
from users_service.domain.users.repositories import PasswordHasher
from users_service.shared.logging import logger

# scrypt N=2**15, r=8, p=1: about the cost of bcrypt's default work factor
DEFAULT_METHOD = "scrypt:32768:8:1"


class WerkzeugPasswordHasher(PasswordHasher):
    def __init__(self, method: str = DEFAULT_METHOD) -> None:
        self._method = method

    def hash(self, password: str) -> str:
        try:
            return str(generate_password_hash(password, method=self._method))
        except (MemoryError, OSError, ValueError) as exc:
            logger.error(f"password_hashing: hash failed ({type(exc).__name__})")
            raise HashingFailureError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        if hashed.count("$") < 2:
            raise MalformedDigestError()
        try:
            return bool(check_password_hash(hashed, password))
        except ValueError as exc:
            raise MalformedDigestError() from exc
