# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from typing import Any, Protocol

from .entities import ActivationCode, SessionGrant, User


class UserRepository(Protocol):
    def add(self, user: User) -> User: ...
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_email_and_activation_code(
        self, email: str, code: str, now: datetime
    ) -> User | None: ...
    def mark_activated(self, user_id: str) -> None: ...
    def list_all(self) -> Sequence[User]: ...
    def ping(self) -> None: ...


class SessionCache(Protocol):
    def put(self, key: str, value: str, ttl: timedelta) -> None: ...
    def get(self, key: str) -> str | None: ...
    def ping(self) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class ActivationCodeGenerator(Protocol):
    def generate(self) -> ActivationCode: ...


class SessionIssuer(Protocol):
    def issue(self, user_id: str) -> SessionGrant: ...


class EventPublisher(Protocol):
    def publish(self, event: str, payload: Mapping[str, Any]) -> None: ...
