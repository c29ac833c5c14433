# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from sqlalchemy import select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from users_service.domain.users.entities import User as DomainUser
from users_service.domain.users.exceptions import (
    ActivationConflictError,
    StoreUnavailableError,
    UserAlreadyExistsError,
)
from users_service.domain.users.repositories import UserRepository
from users_service.infrastructure.db.models import User
from users_service.infrastructure.db.session import session_scope
from users_service.shared.logging import logger


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        activated=bool(row.activated),
        activation_code=row.activation_code,
        activation_code_expiry=_as_utc(row.activation_code_expiry),
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope(self._session_factory) as session:
                session.add(
                    User(
                        id=user.id,
                        email=user.email,
                        password_hash=user.password_hash,
                        activated=user.activated,
                        activation_code=user.activation_code,
                        activation_code_expiry=user.activation_code_expiry.astimezone(UTC),
                        created_at=user.created_at.astimezone(UTC),
                    )
                )
        except IntegrityError as exc:
            logger.info("users.store: duplicate email rejected")
            raise UserAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            logger.error(f"users.store: insert failed ({type(exc).__name__})")
            raise StoreUnavailableError("add") from exc
        return user

    def find_by_email(self, email: str) -> DomainUser | None:
        try:
            with session_scope(self._session_factory) as session:
                row = session.scalars(select(User).where(User.email == email)).first()
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            logger.error(f"users.store: lookup failed ({type(exc).__name__})")
            raise StoreUnavailableError("find_by_email") from exc

    def find_by_email_and_activation_code(
        self, email: str, code: str, now: datetime
    ) -> DomainUser | None:
        try:
            with session_scope(self._session_factory) as session:
                row = session.scalars(
                    select(User).where(
                        User.email == email,
                        User.activation_code == code,
                        User.activated.is_(False),
                        User.activation_code_expiry > now.astimezone(UTC),
                    )
                ).first()
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            logger.error(f"users.store: activation lookup failed ({type(exc).__name__})")
            raise StoreUnavailableError("find_by_email_and_activation_code") from exc

    def mark_activated(self, user_id: str) -> None:
        try:
            with session_scope(self._session_factory) as session:
                result = session.execute(
                    update(User)
                    .where(User.id == user_id, User.activated.is_(False))
                    .values(activated=True)
                )
                if result.rowcount != 1:
                    raise ActivationConflictError()
        except SQLAlchemyError as exc:
            logger.error(f"users.store: activation update failed ({type(exc).__name__})")
            raise StoreUnavailableError("mark_activated") from exc

    def list_all(self) -> Sequence[DomainUser]:
        try:
            with session_scope(self._session_factory) as session:
                rows = session.scalars(
                    select(User).order_by(User.created_at.asc(), User.id.asc())
                ).all()
                return [_to_domain(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.error(f"users.store: listing failed ({type(exc).__name__})")
            raise StoreUnavailableError("list_all") from exc

    def ping(self) -> None:
        try:
            with session_scope(self._session_factory) as session:
                session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("ping") from exc
