"""Correlation id por contexto de execução (task asyncio)."""

from __future__ import annotations

import contextlib
import uuid
from collections.abc import Generator
from contextvars import ContextVar

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id corrente (ou vazio)."""

    return _correlation_id.get()


@contextlib.contextmanager
def correlation_scope(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Define correlation_id enquanto o bloco executa.

    Reaproveita o id já presente no contexto quando nenhum é informado,
    para que chamadas aninhadas compartilhem o mesmo rastro.
    """
    value = correlation_id or get_correlation_id() or str(uuid.uuid4())
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
