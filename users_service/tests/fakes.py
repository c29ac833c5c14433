from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Any

from users_service.domain.users.entities import ActivationCode, User
from users_service.domain.users.exceptions import (
    ActivationConflictError,
    StoreUnavailableError,
    UserAlreadyExistsError,
)
from users_service.domain.users.repositories import (
    ActivationCodeGenerator,
    EventPublisher,
    PasswordHasher,
    UserRepository,
)

SIGNING_KEY = "test-signing-key-0123456789abcdef0123456789"
ACTIVATION_CODE = "0123456789abcdef"


class MutableClock:
    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: dict[str, User] = {}
        self.unavailable = False

    def _check(self, operation: str) -> None:
        if self.unavailable:
            raise StoreUnavailableError(operation)

    def add(self, user: User) -> User:
        self._check("add")
        with self._lock:
            if user.email in self._users:
                raise UserAlreadyExistsError()
            self._users[user.email] = user
        return user

    def find_by_email(self, email: str) -> User | None:
        self._check("find_by_email")
        return self._users.get(email)

    def find_by_email_and_activation_code(
        self, email: str, code: str, now: datetime
    ) -> User | None:
        self._check("find_by_email_and_activation_code")
        user = self._users.get(email)
        if (
            user
            and user.activation_code == code
            and not user.activated
            and now < user.activation_code_expiry
        ):
            return user
        return None

    def mark_activated(self, user_id: str) -> None:
        self._check("mark_activated")
        with self._lock:
            for email, user in self._users.items():
                if user.id == user_id and not user.activated:
                    self._users[email] = replace(user, activated=True)
                    return
        raise ActivationConflictError()

    def list_all(self) -> Sequence[User]:
        self._check("list_all")
        return list(self._users.values())

    def ping(self) -> None:
        self._check("ping")


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"plain$salt${password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"plain$salt${password}"


class FixedActivationCodes(ActivationCodeGenerator):
    def __init__(self, clock: MutableClock, validity: timedelta = timedelta(hours=24)) -> None:
        self._clock = clock
        self._validity = validity

    def generate(self) -> ActivationCode:
        return ActivationCode(code=ACTIVATION_CODE, expires_at=self._clock() + self._validity)


class RecordingEventPublisher(EventPublisher):
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def publish(self, event: str, payload: Mapping[str, Any]) -> None:
        self.events.append((event, dict(payload)))


class FailingEventPublisher(EventPublisher):
    def publish(self, event: str, payload: Mapping[str, Any]) -> None:
        raise ConnectionError("broker unreachable")
