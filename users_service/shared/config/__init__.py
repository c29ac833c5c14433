# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import (
    ActivationConfig,
    AppConfig,
    CacheConfig,
    DatabaseConfig,
    ObservabilityConfig,
    SecurityConfig,
    ServerConfig,
    SessionConfig,
    load_config,
)

__all__ = [
    "ActivationConfig",
    "AppConfig",
    "CacheConfig",
    "DatabaseConfig",
    "ObservabilityConfig",
    "SecurityConfig",
    "ServerConfig",
    "SessionConfig",
    "load_config",
]
