# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Event channel adapters. No external broker is wired up yet."""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from users_service.domain.users.repositories import EventPublisher
from users_service.infrastructure.observability import EVENTS_COUNTER
from users_service.shared.logging import logger


class LoggingEventPublisher(EventPublisher):
    """Placeholder channel: records the event name and drops the payload."""

    def publish(self, event: str, payload: Mapping[str, Any]) -> None:
        EVENTS_COUNTER.labels(event=event).inc()
        logger.info(f"events: {event} user_id={payload.get('user_id')}")


class BackgroundEventPublisher(EventPublisher):
    """Fire-and-forget wrapper; delivery runs on a small worker pool."""

    def __init__(self, delegate: EventPublisher, *, max_workers: int = 2) -> None:
        self._delegate = delegate
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="events"
        )

    def publish(self, event: str, payload: Mapping[str, Any]) -> None:
        future = self._executor.submit(self._delegate.publish, event, dict(payload))
        future.add_done_callback(lambda done: self._report(event, done))

    @staticmethod
    def _report(event: str, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.warning(f"events: delivery of {event} failed ({type(exc).__name__}: {exc})")

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


__all__ = ["BackgroundEventPublisher", "LoggingEventPublisher"]
