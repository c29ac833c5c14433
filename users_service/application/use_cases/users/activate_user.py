# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from users_service.application.services.notifications import USER_ACTIVATED, emit
from users_service.domain.users.exceptions import (
    ActivationCodeInvalidError,
    ActivationConflictError,
    InternalServiceError,
    StoreUnavailableError,
)
from users_service.domain.users.repositories import EventPublisher, UserRepository
from users_service.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ActivateUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        events: EventPublisher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._events = events
        self._clock = clock

    def execute(self, email: str, code: str) -> None:
        # Wrong, expired and already used codes all surface as the same error.
        try:
            user = self._users.find_by_email_and_activation_code(email, code, self._clock())
            if user is None:
                logger.info("users.activate: no pending activation matches")
                raise ActivationCodeInvalidError()
            self._users.mark_activated(user.id)
        except ActivationConflictError as exc:
            logger.info("users.activate: lost activation race")
            raise ActivationCodeInvalidError() from exc
        except StoreUnavailableError as exc:
            raise InternalServiceError() from exc

        logger.info(f"users.activate: ok user_id={user.id}")
        emit(self._events, USER_ACTIVATED, {"user_id": user.id, "email": user.email})
