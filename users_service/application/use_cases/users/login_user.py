# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from users_service.domain.users.exceptions import (
    CacheUnavailableError,
    InternalServiceError,
    InvalidCredentialsError,
    MalformedDigestError,
    SigningFailureError,
    StoreUnavailableError,
)
from users_service.domain.users.repositories import PasswordHasher, SessionIssuer, UserRepository
from users_service.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionIssuer,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher

    def execute(self, email: str, password: str) -> str:
        try:
            user = self._users.find_by_email(email)
        except StoreUnavailableError as exc:
            raise InternalServiceError() from exc

        if user is None:
            raise InvalidCredentialsError()

        try:
            password_valid = self._password_hasher.verify(password, user.password_hash)
        except MalformedDigestError as exc:
            logger.error(f"users.login: stored digest is malformed user_id={user.id}")
            raise InternalServiceError() from exc

        if not password_valid:
            raise InvalidCredentialsError()

        # Unactivated users may log in.
        try:
            grant = self._sessions.issue(user.id)
        except (SigningFailureError, CacheUnavailableError) as exc:
            raise InternalServiceError() from exc

        logger.info(f"users.login: ok user_id={user.id}")
        return grant.token
