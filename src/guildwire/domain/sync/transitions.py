"""Tabela de transições da sincronização.

- TRANSITIONS[(current_state, event)] = next_state
- Estados terminais não aparecem como origem
- Validação pura: sem side effects
"""

from __future__ import annotations

from guildwire.domain.sync.events import SyncEvent
from guildwire.domain.sync.states import TERMINAL_STATES, SyncState

TRANSITIONS: dict[tuple[SyncState, SyncEvent], SyncState] = {
    # === IDLE → ... ===
    (SyncState.IDLE, SyncEvent.SYNC_REQUESTED): SyncState.PARTITIONING,
    # === PARTITIONING → ... ===
    (SyncState.PARTITIONING, SyncEvent.PLAN_REJECTED): SyncState.IDLE,
    (SyncState.PARTITIONING, SyncEvent.GLOBAL_PENDING): SyncState.SYNCING_GLOBAL,
    (SyncState.PARTITIONING, SyncEvent.SCOPES_PENDING): SyncState.SYNCING_SCOPES,
    (SyncState.PARTITIONING, SyncEvent.NOTHING_PENDING): SyncState.DONE,
    # === SYNCING_GLOBAL → ... ===
    (SyncState.SYNCING_GLOBAL, SyncEvent.SCOPES_PENDING): SyncState.SYNCING_SCOPES,
    (SyncState.SYNCING_GLOBAL, SyncEvent.NOTHING_PENDING): SyncState.DONE,
    (SyncState.SYNCING_GLOBAL, SyncEvent.REMOTE_FAILED): SyncState.FAILED,
    # === SYNCING_SCOPES → ... ===
    (SyncState.SYNCING_SCOPES, SyncEvent.NOTHING_PENDING): SyncState.DONE,
    (SyncState.SYNCING_SCOPES, SyncEvent.REMOTE_FAILED): SyncState.FAILED,
}


def validate_transition(
    current_state: SyncState, event: SyncEvent
) -> tuple[bool, SyncState | None, str]:
    """Valida se uma transição é permitida.

    Retorna:
    - (True, next_state, ""): transição válida
    - (False, None, motivo): transição inválida

    Nunca lança exceção; apenas valida.
    """
    if current_state in TERMINAL_STATES:
        return False, None, f"Terminal state {current_state} has no transitions"

    key = (current_state, event)
    if key not in TRANSITIONS:
        return False, None, f"No transition from {current_state} on event {event}"

    return True, TRANSITIONS[key], ""
