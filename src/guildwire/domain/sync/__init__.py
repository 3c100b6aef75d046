"""FSM de sincronização de comandos — estados, eventos e transições.

Exporta:
- SyncState: estados da passagem
- SyncEvent: eventos
- validate_transition: validador puro
"""

from guildwire.domain.sync.events import SyncEvent
from guildwire.domain.sync.states import (
    NON_TERMINAL_STATES,
    TERMINAL_STATES,
    SyncState,
)
from guildwire.domain.sync.transitions import TRANSITIONS, validate_transition

__all__ = [
    "SyncState",
    "SyncEvent",
    "TRANSITIONS",
    "validate_transition",
    "TERMINAL_STATES",
    "NON_TERMINAL_STATES",
]
