# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, wait

from users_service.shared.logging import logger


def probe(checks: dict[str, Callable[[], None]], timeout: float) -> dict[str, str]:
    """Run every check concurrently; anything unfinished at the deadline fails."""
    results: dict[str, str] = {}
    executor = ThreadPoolExecutor(max_workers=max(len(checks), 1), thread_name_prefix="health")
    try:
        futures = {executor.submit(check): name for name, check in checks.items()}
        done, pending = wait(futures, timeout=timeout)
        for future in done:
            name = futures[future]
            exc = future.exception()
            if exc is None:
                results[name] = "ok"
            else:
                logger.warning(f"health: {name} probe failed ({type(exc).__name__})")
                results[name] = "error"
        for future in pending:
            name = futures[future]
            logger.warning(f"health: {name} probe timed out after {timeout}s")
            results[name] = "timeout"
    finally:
        # A hung probe must not hold up the response.
        executor.shutdown(wait=False, cancel_futures=True)
    return results


__all__ = ["probe"]
