"""Package `commands` — registro e sincronização de comandos de aplicação.

Exports principais:
- CommandRegistry: registro ordenado (register_slash/group/context_menu)
- CommandSynchronizer: passagem de bulk-replace global → guilds
- DefaultScopeConfig, SyncReport, build_sync_plan
"""

from __future__ import annotations

from guildwire.application.commands.models import (
    Command,
    GroupCommand,
    RegisteredCommand,
    SubcommandGroup,
)
from guildwire.application.commands.registry import CommandRegistry, RegistryPhase
from guildwire.application.commands.synchronizer import (
    CommandSynchronizer,
    DefaultScopeConfig,
    SyncPlan,
    SyncReport,
    build_sync_plan,
)

__all__ = [
    "Command",
    "CommandRegistry",
    "CommandSynchronizer",
    "DefaultScopeConfig",
    "GroupCommand",
    "RegisteredCommand",
    "RegistryPhase",
    "SubcommandGroup",
    "SyncPlan",
    "SyncReport",
    "build_sync_plan",
]
