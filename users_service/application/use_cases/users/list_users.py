# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from users_service.domain.users.entities import PublicUser
from users_service.domain.users.exceptions import InternalServiceError, StoreUnavailableError
from users_service.domain.users.repositories import UserRepository


class ListUsersUseCase:
    """Return every user; a full scan, there is no pagination."""

    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self) -> list[PublicUser]:
        try:
            users = self._users.list_all()
        except StoreUnavailableError as exc:
            raise InternalServiceError() from exc
        return [user.to_public() for user in users]


__all__ = ["ListUsersUseCase"]
