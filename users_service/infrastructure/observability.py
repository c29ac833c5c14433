# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, Response, g, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_LATENCY = Histogram(
    "users_request_latency_seconds",
    "Request latency",
    labelnames=("endpoint",),
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "users_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
EVENTS_COUNTER = Counter(
    "users_account_events_total",
    "Account lifecycle transitions",
    labelnames=("event",),
)


def bind_metrics(app: Flask) -> None:
    @app.before_request
    def _start_timer() -> None:
        g._metrics_t0 = time.perf_counter()

    @app.after_request
    def _record(response):
        endpoint = request.url_rule.rule if request.url_rule else "unmatched"
        started = getattr(g, "_metrics_t0", None)
        if started is not None:
            REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - started)
        REQUEST_COUNTER.labels(endpoint=endpoint, status=str(response.status_code)).inc()
        return response


def metrics_response() -> Response:
    return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)


__all__ = [
    "EVENTS_COUNTER",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "bind_metrics",
    "metrics_response",
]
