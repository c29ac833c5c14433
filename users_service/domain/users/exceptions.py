# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from users_service.shared.errors.base import DomainError, InfrastructureError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "A user with this email already exists"


class ActivationCodeInvalidError(DomainError):
    code = "invalid_activation_code"
    message = "The activation code is invalid"


class InvalidCredentialsError(DomainError):
    code = "invalid_user_or_password"
    message = "Invalid user or password"


class UnauthorizedError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    message = "Missing, invalid or expired session token"


class ActivationConflictError(DomainError):
    """Raised by the store when the user was activated concurrently."""

    code = "activation_conflict"
    status = HTTPStatus.CONFLICT


class InternalServiceError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__("internal_error")


class StoreUnavailableError(InfrastructureError):
    def __init__(self, operation: str) -> None:
        super().__init__("store_unavailable", context={"operation": operation})


class CacheUnavailableError(InfrastructureError):
    def __init__(self, operation: str) -> None:
        super().__init__("cache_unavailable", context={"operation": operation})


class HashingFailureError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__("hashing_failure")


class MalformedDigestError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__("malformed_digest")


class SigningFailureError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__("signing_failure")
