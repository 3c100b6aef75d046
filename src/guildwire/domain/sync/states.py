"""Estados de uma passagem de sincronização de comandos.

- Toda passagem termina em DONE ou FAILED
- FAILED só é alcançável a partir de uma fase de bulk-replace
- Transições são explícitas (tabela em transitions.py)
"""

from __future__ import annotations

from enum import StrEnum


class SyncState(StrEnum):
    """Estados da sincronização."""

    IDLE = "IDLE"
    """Nenhuma passagem em andamento."""

    PARTITIONING = "PARTITIONING"
    """Separando comandos em bucket global e buckets por guild."""

    SYNCING_GLOBAL = "SYNCING_GLOBAL"
    """Bulk-replace do bucket global em voo."""

    SYNCING_SCOPES = "SYNCING_SCOPES"
    """Bulk-replace sequencial, uma guild por vez."""

    DONE = "DONE"
    """Todas as partições confirmadas pela API."""

    FAILED = "FAILED"
    """Um bulk-replace falhou; partições restantes não foram tentadas."""


TERMINAL_STATES = frozenset({SyncState.DONE, SyncState.FAILED})

NON_TERMINAL_STATES = frozenset(set(SyncState) - TERMINAL_STATES)
