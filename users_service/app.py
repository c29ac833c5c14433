# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import signal
import threading

from flask import Flask
from werkzeug.serving import make_server

from users_service.infrastructure.container import Container
from users_service.infrastructure.db import uses_in_memory_sqlite
from users_service.infrastructure.observability import bind_metrics
from users_service.shared.config import AppConfig, load_config
from users_service.shared.logging import logger, setup_logging
from users_service.shared.middleware.error_handler import configure_error_handling
from users_service.shared.middleware.request_logger import configure_request_logging


def _base_app(name: str, container: Container) -> Flask:
    debug_mode = container.config.debug_logging
    app = Flask(name)
    configure_error_handling(app, debug_mode=debug_mode)
    configure_request_logging(app, debug_mode=debug_mode)
    if container.config.observability.metrics_enabled:
        bind_metrics(app)
    app.extensions["container"] = container
    return app


def create_public_app(container: Container | None = None) -> Flask:
    container = container or Container()
    app = _base_app("users_service.public", container)
    app.register_blueprint(container.users_controller.as_blueprint())
    logger.info("Public app initialized")
    return app


def create_internal_app(container: Container | None = None) -> Flask:
    container = container or Container()
    app = _base_app("users_service.internal", container)
    app.register_blueprint(container.internal_controller.as_blueprint())
    logger.info("Internal app initialized")
    return app


def ensure_servable(config: AppConfig) -> None:
    if uses_in_memory_sqlite(config.database.url):
        raise RuntimeError(
            "DATABASE_URL points at in-memory SQLite, which cannot back the threaded servers"
        )


def main() -> None:
    config = load_config()
    setup_logging(config.log_level, config.log_file)
    logger.info("configuration loaded")
    ensure_servable(config)

    container = Container(config)
    container.init_db()
    container.user_repository.ping()
    container.session_cache.ping()
    logger.info("store and cache reachable")

    public = make_server(
        config.server.public_host, config.server.public_port,
        create_public_app(container), threaded=True,
    )
    internal = make_server(
        config.server.internal_host, config.server.internal_port,
        create_internal_app(container), threaded=True,
    )

    stop = threading.Event()

    def _terminate(signum, _frame) -> None:
        logger.info(f"terminating on signal {signum}")
        stop.set()

    signal.signal(signal.SIGINT, _terminate)
    signal.signal(signal.SIGTERM, _terminate)

    servers = [public, internal]
    threads = [threading.Thread(target=server.serve_forever, daemon=True) for server in servers]
    for thread in threads:
        thread.start()
    logger.info(f"Running public server on {config.server.public_host}:{config.server.public_port}")
    logger.info(
        f"Running internal server on {config.server.internal_host}:{config.server.internal_port}"
    )

    stop.wait()
    for server in servers:
        server.shutdown()
    container.close()
    logger.info("terminated")


if __name__ == "__main__":
    main()
