# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True, eq=False)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str = ""
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": int(self.status),
            "code": self.code,
            "message": self.message or self.status.phrase,
        }
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(str, getattr(self, "message", ""))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "internal_error",
        *,
        status: HTTPStatus | None = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(
            code=code,
            status=resolved_status,
            message=message
            or "There was an internal error while processing the request",
            context=context,
        )


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            message=message or "Request could not be processed",
            context=context,
        )
