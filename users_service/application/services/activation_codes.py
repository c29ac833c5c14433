# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from users_service.domain.users.entities import ActivationCode
from users_service.domain.users.repositories import ActivationCodeGenerator

CODE_BYTES = 8
CODE_VALIDITY = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SecretsActivationCodeGenerator(ActivationCodeGenerator):
    def __init__(
        self,
        *,
        validity: timedelta = CODE_VALIDITY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._validity = validity
        self._clock = clock

    def generate(self) -> ActivationCode:
        return ActivationCode(
            code=secrets.token_hex(CODE_BYTES),
            expires_at=self._clock() + self._validity,
        )
