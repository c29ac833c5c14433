# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from users_service.shared.logging import logger

from .base import AppError, InfrastructureError

REQUEST_ID_HEADER = "X-Request-ID"


def error_payload(error: AppError) -> dict[str, Any]:
    payload = error.to_dict()
    payload["request_id"] = request.headers.get(REQUEST_ID_HEADER, "")
    return payload


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error_payload(error)), error.status


def register_error_handler(app: Flask, *, debug_mode: bool = False) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(f"Application error {exc.code} on {request.method} {request.path}")
        else:
            logger.info(f"Rejected {request.method} {request.path}: {exc.code}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"body_size={len(request.data)}"
            )
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")
        return handle_app_error(InfrastructureError())
