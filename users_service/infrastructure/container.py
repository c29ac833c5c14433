# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from users_service.application.services.activation_codes import SecretsActivationCodeGenerator
from users_service.application.services.password_hashing import WerkzeugPasswordHasher
from users_service.application.services.session_issuer import JwtSessionIssuer
from users_service.application.use_cases.users.activate_user import ActivateUserUseCase
from users_service.application.use_cases.users.authorize_session import AuthorizeSessionUseCase
from users_service.application.use_cases.users.list_users import ListUsersUseCase
from users_service.application.use_cases.users.login_user import LoginUserUseCase
from users_service.application.use_cases.users.register_user import RegisterUserUseCase
from users_service.domain.users.repositories import SessionCache
from users_service.infrastructure.cache import build_session_cache
from users_service.infrastructure.db import build_engine, build_session_factory, init_db
from users_service.infrastructure.events import BackgroundEventPublisher, LoggingEventPublisher
from users_service.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from users_service.interfaces.http.controllers.internal_controller import InternalController
from users_service.interfaces.http.controllers.users_controller import UsersController
from users_service.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    def init_db(self) -> None:
        init_db(self.engine)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def session_cache(self) -> SessionCache:
        return build_session_cache(self.config.cache)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(self.config.security.password_hash_method)

    @cached_property
    def activation_codes(self) -> SecretsActivationCodeGenerator:
        return SecretsActivationCodeGenerator(
            validity=timedelta(seconds=self.config.activation.ttl_seconds)
        )

    @cached_property
    def session_issuer(self) -> JwtSessionIssuer:
        return JwtSessionIssuer(
            cache=self.session_cache,
            signing_key=self.config.session.signing_key,
            issuer=self.config.session.issuer,
            ttl=timedelta(seconds=self.config.session.ttl_seconds),
        )

    @cached_property
    def event_publisher(self) -> BackgroundEventPublisher:
        return BackgroundEventPublisher(LoggingEventPublisher())

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            activation_codes=self.activation_codes,
            events=self.event_publisher,
        )

    @cached_property
    def activate_user_use_case(self) -> ActivateUserUseCase:
        return ActivateUserUseCase(users=self.user_repository, events=self.event_publisher)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def authorize_session_use_case(self) -> AuthorizeSessionUseCase:
        return AuthorizeSessionUseCase(cache=self.session_cache)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            register_use_case=self.register_user_use_case,
            activate_use_case=self.activate_user_use_case,
            login_use_case=self.login_user_use_case,
            list_users_use_case=self.list_users_use_case,
        )

    @cached_property
    def internal_controller(self) -> InternalController:
        return InternalController(
            authorize_use_case=self.authorize_session_use_case,
            health_checks={
                "database": self.user_repository.ping,
                "cache": self.session_cache.ping,
            },
            health_timeout=self.config.server.health_timeout,
            metrics_enabled=self.config.observability.metrics_enabled,
        )

    def close(self) -> None:
        if "event_publisher" in self.__dict__:
            self.event_publisher.shutdown()
        if "engine" in self.__dict__:
            self.engine.dispose()
