# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import ActivationCode, PublicUser, SessionGrant, User
from .exceptions import (
    ActivationCodeInvalidError,
    ActivationConflictError,
    CacheUnavailableError,
    HashingFailureError,
    InternalServiceError,
    InvalidCredentialsError,
    MalformedDigestError,
    SigningFailureError,
    StoreUnavailableError,
    UnauthorizedError,
    UserAlreadyExistsError,
)
from .repositories import (
    ActivationCodeGenerator,
    EventPublisher,
    PasswordHasher,
    SessionCache,
    SessionIssuer,
    UserRepository,
)

__all__ = [
    "ActivationCode",
    "ActivationCodeGenerator",
    "ActivationCodeInvalidError",
    "ActivationConflictError",
    "CacheUnavailableError",
    "EventPublisher",
    "HashingFailureError",
    "InternalServiceError",
    "InvalidCredentialsError",
    "MalformedDigestError",
    "PasswordHasher",
    "PublicUser",
    "SessionCache",
    "SessionGrant",
    "SessionIssuer",
    "SigningFailureError",
    "StoreUnavailableError",
    "UnauthorizedError",
    "User",
    "UserAlreadyExistsError",
    "UserRepository",
]
