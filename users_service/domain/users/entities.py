# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: str
    email: str
    password_hash: str
    activated: bool
    activation_code: str
    activation_code_expiry: datetime
    created_at: datetime

    def to_public(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            email=self.email,
            activated=self.activated,
            created_at=self.created_at,
        )


@dataclass(slots=True, frozen=True)
class PublicUser:
    """User view without the password digest or activation code."""

    id: str
    email: str
    activated: bool
    created_at: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "email": self.email,
            "activated": self.activated,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class ActivationCode:

    code: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class SessionGrant:

    token: str
    assertion: str
