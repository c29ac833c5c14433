# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from users_service.application.services.notifications import USER_REGISTERED, emit
from users_service.domain.users.entities import User
from users_service.domain.users.exceptions import (
    HashingFailureError,
    InternalServiceError,
    StoreUnavailableError,
)
from users_service.domain.users.repositories import (
    ActivationCodeGenerator,
    EventPublisher,
    PasswordHasher,
    UserRepository,
)
from users_service.shared.errors.base import ValidationError
from users_service.shared.logging import logger

EMAIL_MAX_LENGTH = 254
PASSWORD_MAX_LENGTH = 128
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def _new_user_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


def validate_credentials(email: str, password: str) -> None:
    fields: list[str] = []
    if not email or len(email) > EMAIL_MAX_LENGTH or not _EMAIL_RE.match(email):
        fields.append("email")
    if not password or len(password) > PASSWORD_MAX_LENGTH:
        fields.append("password")
    if fields:
        raise ValidationError(context={"fields": fields})


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        activation_codes: ActivationCodeGenerator,
        events: EventPublisher,
        id_factory: Callable[[], str] = _new_user_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._activation_codes = activation_codes
        self._events = events
        self._id_factory = id_factory
        self._clock = clock

    def execute(self, email: str, password: str) -> User:
        validate_credentials(email, password)

        try:
            hashed = self._password_hasher.hash(password)
        except HashingFailureError as exc:
            raise InternalServiceError() from exc

        activation = self._activation_codes.generate()
        user = User(
            id=self._id_factory(),
            email=email,
            password_hash=hashed,
            activated=False,
            activation_code=activation.code,
            activation_code_expiry=activation.expires_at,
            created_at=self._clock(),
        )
        try:
            persisted = self._users.add(user)
        except StoreUnavailableError as exc:
            raise InternalServiceError() from exc

        logger.info(f"users.register: ok user_id={persisted.id}")
        emit(
            self._events,
            USER_REGISTERED,
            {
                "user_id": persisted.id,
                "email": persisted.email,
                "activation_code": persisted.activation_code,
                "expires_at": persisted.activation_code_expiry.isoformat(),
            },
        )
        return persisted
