from .base import AppError, DomainError, InfrastructureError, ValidationError
from .http import error_payload, handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
    "ValidationError",
    "error_payload",
    "handle_app_error",
    "register_error_handler",
]
