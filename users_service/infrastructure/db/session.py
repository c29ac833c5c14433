# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from users_service.shared.config import DatabaseConfig
from users_service.shared.logging import logger


class Base(DeclarativeBase):
    pass


def uses_in_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def build_engine(config: DatabaseConfig) -> Engine:
    url = make_url(config.url)
    kwargs: dict[str, object] = {"echo": False, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        connect_args: dict[str, object] = {
            "check_same_thread": False,
            "timeout": config.timeout,
        }
        # One connection shared by every caller; not safe under the threaded server.
        if uses_in_memory_sqlite(config.url):
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_size"] = config.pool_size
            kwargs["max_overflow"] = config.max_overflow
            kwargs["pool_timeout"] = config.timeout
    else:
        connect_args = {}
        if url.get_backend_name() == "postgresql":
            timeout_ms = int(config.timeout * 1000)
            connect_args = {
                "connect_timeout": max(int(config.timeout), 1),
                "options": f"-c statement_timeout={timeout_ms}",
            }
        kwargs["pool_size"] = config.pool_size
        kwargs["max_overflow"] = config.max_overflow
        kwargs["pool_timeout"] = config.timeout

    return create_engine(url, connect_args=connect_args, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    session = factory()
    logger.debug("db.session: opened session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed session")
    except Exception:
        logger.debug("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    # Registers the mapped tables on Base.metadata.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")
