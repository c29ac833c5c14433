# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from users_service.application.use_cases.users.authorize_session import (
    BEARER_PREFIX,
    AuthorizeSessionUseCase,
    parse_bearer,
)
from users_service.domain.users.exceptions import UnauthorizedError
from users_service.infrastructure.health import probe
from users_service.infrastructure.observability import metrics_response
from users_service.shared.logging import logger


class InternalController:
    """Routes for trusted callers on the internal network."""

    def __init__(
        self,
        *,
        authorize_use_case: AuthorizeSessionUseCase,
        health_checks: dict[str, Callable[[], None]],
        health_timeout: float,
        metrics_enabled: bool = True,
    ) -> None:
        self._authorize_use_case = authorize_use_case
        self._health_checks = health_checks
        self._health_timeout = health_timeout
        self._metrics_enabled = metrics_enabled

    def authorize(self) -> Response:
        token = parse_bearer(request.headers.get("Authorization"))
        try:
            assertion = self._authorize_use_case.execute(token)
        except UnauthorizedError:
            return Response(status=HTTPStatus.UNAUTHORIZED)
        response = Response(status=HTTPStatus.OK)
        response.headers["Authorization"] = f"{BEARER_PREFIX}{assertion}"
        return response

    def health(self) -> tuple[Response, HTTPStatus]:
        results = probe(self._health_checks, self._health_timeout)
        ok = all(state == "ok" for state in results.values())
        if not ok:
            logger.warning(f"health: degraded {results}")
        status = HTTPStatus.OK if ok else HTTPStatus.BAD_GATEWAY
        return jsonify({"ok": ok, **results}), status

    def metrics(self) -> Response:
        if not self._metrics_enabled:
            return Response(status=HTTPStatus.NOT_FOUND)
        return metrics_response()

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("internal", __name__)
        bp.add_url_rule(
            "/authorize/", view_func=self.authorize, methods=["GET"], strict_slashes=False
        )
        bp.add_url_rule("/healthz", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/metricz", view_func=self.metrics, methods=["GET"])
        return bp
