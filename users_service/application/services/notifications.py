# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from users_service.domain.users.repositories import EventPublisher
from users_service.shared.logging import logger

USER_REGISTERED = "user.registered"
USER_ACTIVATED = "user.activated"


def emit(events: EventPublisher, event: str, payload: Mapping[str, Any]) -> None:
    """Hand an event to the publisher; a failure here never fails the caller."""
    try:
        events.publish(event, payload)
    except Exception as exc:
        logger.warning(f"events: failed to emit {event} ({type(exc).__name__}: {exc})")


__all__ = ["USER_ACTIVATED", "USER_REGISTERED", "emit"]
