"""Context manager para instrumentação de latência."""

from __future__ import annotations

import contextlib
import time
from collections.abc import Generator
from typing import Any

from guildwire.observability.logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def timed(component: str, **fields: Any) -> Generator[None, None, None]:
    """Mede e loga o tempo decorrido de um bloco.

    Uso:
        with timed("command_sync", partition="global"):
            await transport.request(...)

    O log é emitido mesmo se o bloco falhar (inclusive cancelamento).
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "component_latency",
            extra={
                "component": component,
                "elapsed_ms": round(elapsed_ms, 2),
                **fields,
            },
        )
