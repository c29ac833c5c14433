# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from typing import TypeVar

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from users_service.application.use_cases.users.activate_user import ActivateUserUseCase
from users_service.application.use_cases.users.authorize_session import BEARER_PREFIX
from users_service.application.use_cases.users.list_users import ListUsersUseCase
from users_service.application.use_cases.users.login_user import LoginUserUseCase
from users_service.application.use_cases.users.register_user import RegisterUserUseCase
from users_service.interfaces.http.dto.users import (
    ActivateRequestDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
)
from users_service.shared.errors.validation import raise_validation_error

DtoT = TypeVar("DtoT", bound=BaseModel)


def _parse(model: type[DtoT]) -> DtoT:
    try:
        return model.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


def _no_content() -> Response:
    return Response(status=HTTPStatus.NO_CONTENT)


class UsersController:
    """Public, user-facing routes."""

    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        activate_use_case: ActivateUserUseCase,
        login_use_case: LoginUserUseCase,
        list_users_use_case: ListUsersUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._activate_use_case = activate_use_case
        self._login_use_case = login_use_case
        self._list_users_use_case = list_users_use_case

    def register(self) -> Response:
        dto = _parse(RegisterRequestDTO)
        self._register_use_case.execute(dto.email, dto.password)
        return _no_content()

    def login(self) -> Response:
        dto = _parse(LoginRequestDTO)
        token = self._login_use_case.execute(dto.email, dto.password)
        response = _no_content()
        response.headers["Authorization"] = f"{BEARER_PREFIX}{token}"
        return response

    def activate(self) -> Response:
        dto = _parse(ActivateRequestDTO)
        self._activate_use_case.execute(dto.email, dto.code)
        return _no_content()

    def list_users(self) -> Response:
        users = self._list_users_use_case.execute()
        return jsonify([user.to_dict() for user in users])

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__)
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/activate", view_func=self.activate, methods=["POST"])
        bp.add_url_rule("/", view_func=self.list_users, methods=["GET"])
        return bp
