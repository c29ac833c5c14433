from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta

import pytest

from users_service.application.services.session_issuer import JwtSessionIssuer
from users_service.application.use_cases.users.activate_user import ActivateUserUseCase
from users_service.application.use_cases.users.authorize_session import AuthorizeSessionUseCase
from users_service.application.use_cases.users.list_users import ListUsersUseCase
from users_service.application.use_cases.users.login_user import LoginUserUseCase
from users_service.application.use_cases.users.register_user import RegisterUserUseCase
from users_service.domain.users.exceptions import (
    ActivationCodeInvalidError,
    CacheUnavailableError,
    HashingFailureError,
    InternalServiceError,
    InvalidCredentialsError,
    MalformedDigestError,
    UnauthorizedError,
    UserAlreadyExistsError,
)
from users_service.infrastructure.cache import InMemorySessionCache
from users_service.shared.errors.base import ValidationError
from users_service.tests.fakes import (
    ACTIVATION_CODE,
    SIGNING_KEY,
    DeterministicHasher,
    FailingEventPublisher,
    FixedActivationCodes,
    InMemoryUserRepository,
    MutableClock,
    RecordingEventPublisher,
)


@dataclass
class Lifecycle:
    users: InMemoryUserRepository
    cache: InMemorySessionCache
    events: RecordingEventPublisher
    clock: MutableClock
    register: RegisterUserUseCase
    activate: ActivateUserUseCase
    login: LoginUserUseCase
    authorize: AuthorizeSessionUseCase
    list_users: ListUsersUseCase


def _build(session_ttl: timedelta = timedelta(days=7)) -> Lifecycle:
    users = InMemoryUserRepository()
    cache = InMemorySessionCache()
    events = RecordingEventPublisher()
    clock = MutableClock()
    hasher = DeterministicHasher()
    issuer = JwtSessionIssuer(
        cache=cache, signing_key=SIGNING_KEY, issuer="users-test", ttl=session_ttl
    )
    return Lifecycle(
        users=users,
        cache=cache,
        events=events,
        clock=clock,
        register=RegisterUserUseCase(
            users=users,
            password_hasher=hasher,
            activation_codes=FixedActivationCodes(clock),
            events=events,
            clock=clock,
        ),
        activate=ActivateUserUseCase(users=users, events=events, clock=clock),
        login=LoginUserUseCase(users=users, sessions=issuer, password_hasher=hasher),
        authorize=AuthorizeSessionUseCase(cache=cache),
        list_users=ListUsersUseCase(users=users),
    )


@pytest.fixture()
def lifecycle() -> Lifecycle:
    return _build()


def test_register_creates_single_unactivated_user(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")

    listed = lifecycle.list_users.execute()

    assert len(listed) == 1
    assert listed[0].email == "alice@example.com"
    assert listed[0].activated is False
    assert not hasattr(listed[0], "password_hash")
    assert not hasattr(listed[0], "activation_code")


def test_register_stores_hash_and_activation_code(lifecycle: Lifecycle) -> None:
    user = lifecycle.register.execute("alice@example.com", "secret123")

    assert user.password_hash != "secret123"
    assert user.activation_code == ACTIVATION_CODE
    assert user.activation_code_expiry == lifecycle.clock() + timedelta(hours=24)
    assert lifecycle.events.events[0][0] == "user.registered"


def test_register_duplicate_email_conflicts(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")

    with pytest.raises(UserAlreadyExistsError):
        lifecycle.register.execute("alice@example.com", "other-password")

    assert len(lifecycle.list_users.execute()) == 1


@pytest.mark.parametrize(
    ("email", "password"),
    [
        ("", "secret123"),
        ("alice@example.com", ""),
        ("not-an-email", "secret123"),
        ("a" * 250 + "@example.com", "secret123"),
        ("alice@example.com", "x" * 129),
    ],
)
def test_register_rejects_invalid_input(lifecycle: Lifecycle, email: str, password: str) -> None:
    with pytest.raises(ValidationError):
        lifecycle.register.execute(email, password)

    assert lifecycle.list_users.execute() == []


def test_register_hashing_failure_is_internal(lifecycle: Lifecycle) -> None:
    class BrokenHasher(DeterministicHasher):
        def hash(self, password: str) -> str:
            raise HashingFailureError()

    register = RegisterUserUseCase(
        users=lifecycle.users,
        password_hasher=BrokenHasher(),
        activation_codes=FixedActivationCodes(lifecycle.clock),
        events=lifecycle.events,
    )

    with pytest.raises(InternalServiceError):
        register.execute("alice@example.com", "secret123")


def test_register_store_outage_is_internal(lifecycle: Lifecycle) -> None:
    lifecycle.users.unavailable = True

    with pytest.raises(InternalServiceError):
        lifecycle.register.execute("alice@example.com", "secret123")


def test_register_survives_event_channel_failure(lifecycle: Lifecycle) -> None:
    register = RegisterUserUseCase(
        users=lifecycle.users,
        password_hasher=DeterministicHasher(),
        activation_codes=FixedActivationCodes(lifecycle.clock),
        events=FailingEventPublisher(),
    )

    register.execute("alice@example.com", "secret123")

    assert lifecycle.users.find_by_email("alice@example.com") is not None


def test_concurrent_registrations_only_one_wins(lifecycle: Lifecycle) -> None:
    def attempt(_: int) -> str:
        try:
            lifecycle.register.execute("race@example.com", "secret123")
        except UserAlreadyExistsError:
            return "conflict"
        return "ok"

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(16)))

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 15
    assert len(lifecycle.list_users.execute()) == 1


def test_activate_flips_flag_once(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")

    lifecycle.activate.execute("alice@example.com", ACTIVATION_CODE)

    assert lifecycle.users.find_by_email("alice@example.com").activated is True
    assert lifecycle.events.events[-1][0] == "user.activated"
    with pytest.raises(ActivationCodeInvalidError):
        lifecycle.activate.execute("alice@example.com", ACTIVATION_CODE)


def test_activate_with_wrong_code_fails(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")

    with pytest.raises(ActivationCodeInvalidError):
        lifecycle.activate.execute("alice@example.com", "ffffffffffffffff")

    assert lifecycle.users.find_by_email("alice@example.com").activated is False


def test_activate_with_expired_code_leaves_user_unchanged(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")
    before = lifecycle.users.find_by_email("alice@example.com")

    lifecycle.clock.advance(timedelta(hours=24, seconds=1))
    with pytest.raises(ActivationCodeInvalidError):
        lifecycle.activate.execute("alice@example.com", ACTIVATION_CODE)

    assert lifecycle.users.find_by_email("alice@example.com") == before


def test_activate_store_outage_is_internal(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")
    lifecycle.users.unavailable = True

    with pytest.raises(InternalServiceError):
        lifecycle.activate.execute("alice@example.com", ACTIVATION_CODE)


def test_login_issues_token_that_authorizes(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")

    token = lifecycle.login.execute("alice@example.com", "secret123")
    assertion = lifecycle.authorize.execute(token)

    assert len(token) == 48
    assert assertion
    assert token not in assertion


def test_login_does_not_require_activation(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")

    assert lifecycle.login.execute("alice@example.com", "secret123")


def test_login_wrong_password_issues_nothing(lifecycle: Lifecycle) -> None:
    lifecycle.register.execute("alice@example.com", "secret123")

    with pytest.raises(InvalidCredentialsError):
        lifecycle.login.execute("alice@example.com", "wrong")

    assert lifecycle.cache._store == {}


def test_login_unknown_email_looks_like_wrong_password(lifecycle: Lifecycle) -> None:
    with pytest.raises(InvalidCredentialsError) as unknown:
        lifecycle.login.execute("nobody@example.com", "secret123")

    lifecycle.register.execute("alice@example.com", "secret123")
    with pytest.raises(InvalidCredentialsError) as wrong:
        lifecycle.login.execute("alice@example.com", "nope")

    assert unknown.value.to_dict() == wrong.value.to_dict()


def test_login_malformed_digest_is_internal(lifecycle: Lifecycle) -> None:
    class CorruptHasher(DeterministicHasher):
        def verify(self, password: str, hashed: str) -> bool:
            raise MalformedDigestError()

    lifecycle.register.execute("alice@example.com", "secret123")
    login = LoginUserUseCase(
        users=lifecycle.users,
        sessions=JwtSessionIssuer(cache=lifecycle.cache, signing_key=SIGNING_KEY, issuer="t"),
        password_hasher=CorruptHasher(),
    )

    with pytest.raises(InternalServiceError):
        login.execute("alice@example.com", "secret123")


def test_login_cache_outage_is_internal(lifecycle: Lifecycle) -> None:
    class DownCache(InMemorySessionCache):
        def put(self, key, value, ttl) -> None:
            raise CacheUnavailableError("put")

    lifecycle.register.execute("alice@example.com", "secret123")
    login = LoginUserUseCase(
        users=lifecycle.users,
        sessions=JwtSessionIssuer(cache=DownCache(), signing_key=SIGNING_KEY, issuer="t"),
        password_hasher=DeterministicHasher(),
    )

    with pytest.raises(InternalServiceError):
        login.execute("alice@example.com", "secret123")


@pytest.mark.parametrize("token", [None, "", "not hex", "ABCDEF0123456789ABCDEF", "a" * 200])
def test_authorize_rejects_malformed_tokens(lifecycle: Lifecycle, token: str | None) -> None:
    with pytest.raises(UnauthorizedError):
        lifecycle.authorize.execute(token)


def test_authorize_rejects_unknown_token(lifecycle: Lifecycle) -> None:
    with pytest.raises(UnauthorizedError):
        lifecycle.authorize.execute("ab" * 24)


def test_authorize_rejects_expired_session() -> None:
    lifecycle = _build(session_ttl=timedelta(seconds=0))
    lifecycle.register.execute("alice@example.com", "secret123")
    token = lifecycle.login.execute("alice@example.com", "secret123")

    with pytest.raises(UnauthorizedError):
        lifecycle.authorize.execute(token)


def test_authorize_folds_cache_errors_into_unauthorized() -> None:
    class DownCache(InMemorySessionCache):
        def get(self, key: str) -> str | None:
            raise CacheUnavailableError("get")

    with pytest.raises(UnauthorizedError):
        AuthorizeSessionUseCase(cache=DownCache()).execute("ab" * 24)


def test_list_users_store_outage_is_internal(lifecycle: Lifecycle) -> None:
    lifecycle.users.unavailable = True

    with pytest.raises(InternalServiceError):
        lifecycle.list_users.execute()
