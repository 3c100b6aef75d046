"""Eventos que movem a sincronização entre estados."""

from __future__ import annotations

from enum import StrEnum


class SyncEvent(StrEnum):
    """Eventos da sincronização."""

    SYNC_REQUESTED = "SYNC_REQUESTED"
    """Chamada explícita a synchronize()."""

    PLAN_REJECTED = "PLAN_REJECTED"
    """Partição impossível (ConfigurationError); nada foi enviado."""

    GLOBAL_PENDING = "GLOBAL_PENDING"
    """Bucket global não vazio."""

    SCOPES_PENDING = "SCOPES_PENDING"
    """Há guilds na lista de trabalho."""

    NOTHING_PENDING = "NOTHING_PENDING"
    """Nada mais a enviar."""

    REMOTE_FAILED = "REMOTE_FAILED"
    """Bulk-replace devolveu RemoteError."""
