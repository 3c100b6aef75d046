"""Sincronização do registro de comandos com a API (bulk-replace).

Fluxo de uma passagem:
    IDLE → PARTITIONING → [SYNCING_GLOBAL] → [SYNCING_SCOPES] → DONE
                                  └──────────────┴──→ FAILED

Regras:
- Partição é pura e acontece antes de qualquer chamada de rede
  (ConfigurationError é levantado sem I/O)
- Bulk-replace global precede todas as guilds; guilds são enviadas
  uma por vez, na ordem da lista de trabalho
- Primeiro RemoteError aborta as guilds restantes; partições já
  confirmadas permanecem em vigor (sem rollback, sem retry)
- Escopo explícito sempre prevalece sobre a configuração padrão
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from guildwire.adapters.discord import routes
from guildwire.adapters.discord.errors import (
    CommandSyncError,
    ConfigurationError,
    RemoteError,
)
from guildwire.adapters.discord.models import Application
from guildwire.adapters.discord.routes import Route
from guildwire.application.commands.models import RegisteredCommand
from guildwire.application.commands.registry import CommandRegistry
from guildwire.config.settings import Settings, get_settings
from guildwire.domain.commands import DefaultScope, GlobalScope, ScopedTo
from guildwire.domain.protocols import DispatchTransport
from guildwire.domain.sync import SyncEvent, SyncState, validate_transition
from guildwire.observability.context import correlation_scope
from guildwire.observability.logging import get_logger
from guildwire.observability.timing import timed

logger: logging.Logger = get_logger(__name__)

GLOBAL_PARTITION = "global"


@dataclass(frozen=True, slots=True)
class DefaultScopeConfig:
    """Destino dos comandos com escopo padrão.

    guild_ids vazio significa global.
    """

    guild_ids: frozenset[str] = frozenset()

    @classmethod
    def global_(cls) -> DefaultScopeConfig:
        return cls()

    @classmethod
    def scoped(cls, *guild_ids: str | int) -> DefaultScopeConfig:
        return cls(frozenset(str(guild_id) for guild_id in guild_ids))

    @property
    def is_global(self) -> bool:
        return not self.guild_ids

    @classmethod
    def coerce(cls, value: DefaultScopeConfig | Iterable[str | int] | bool | None) -> DefaultScopeConfig | None:
        """Aceita o formato legado: False/True → global, lista → guilds, None → sem config."""
        if value is None or isinstance(value, DefaultScopeConfig):
            return value
        if isinstance(value, bool):
            return cls.global_()
        if isinstance(value, str | int):
            return cls.scoped(value)
        return cls.scoped(*value)

    @classmethod
    def from_settings(cls, settings: Settings) -> DefaultScopeConfig | None:
        """Fallback configurado: guild ids padrão, senão global se habilitado."""
        if settings.command_default_guild_ids:
            return cls.scoped(*settings.command_default_guild_ids)
        if settings.command_default_global:
            return cls.global_()
        return None


@dataclass(frozen=True, slots=True)
class SyncPlan:
    """Partição efêmera do registro; recalculada a cada passagem."""

    global_commands: tuple[RegisteredCommand, ...] = ()
    scoped_commands: Mapping[str, tuple[RegisteredCommand, ...]] = field(default_factory=dict)

    @property
    def scope_worklist(self) -> tuple[str, ...]:
        """Guilds na ordem em que foram encontradas."""
        return tuple(self.scoped_commands)

    @property
    def is_empty(self) -> bool:
        return not self.global_commands and not self.scoped_commands


def _target_guilds(
    command: RegisteredCommand,
    default_config: DefaultScopeConfig | None,
) -> tuple[str, ...]:
    """Guilds de destino do comando (vazio = global)."""
    scope = command.scope
    if isinstance(scope, GlobalScope):
        return ()
    if isinstance(scope, ScopedTo):
        return tuple(sorted(scope.ids))
    if isinstance(scope, DefaultScope):
        if default_config is None:
            raise ConfigurationError(
                f"Comando '{command.name}' usa escopo padrão, mas nenhuma configuração "
                "padrão foi informada (COMMAND_DEFAULT_GUILD_IDS ou COMMAND_DEFAULT_GLOBAL)"
            )
        return tuple(sorted(default_config.guild_ids))
    raise ConfigurationError(f"Escopo desconhecido em '{command.name}': {scope!r}")


def build_sync_plan(
    commands: Sequence[RegisteredCommand],
    default_config: DefaultScopeConfig | None,
) -> SyncPlan:
    """Particiona comandos em bucket global e buckets por guild.

    Args:
        commands: Comandos raiz na ordem de registro
        default_config: Destino dos comandos com escopo padrão

    Returns:
        SyncPlan; cada comando aparece no bucket global ou em um
        conjunto não vazio de guilds, nunca nos dois

    Raises:
        ConfigurationError: Comando com escopo padrão sem configuração
    """
    global_commands: list[RegisteredCommand] = []
    scoped: dict[str, list[RegisteredCommand]] = {}

    for command in commands:
        guild_ids = _target_guilds(command, default_config)
        if not guild_ids:
            global_commands.append(command)
            continue
        for guild_id in guild_ids:
            scoped.setdefault(guild_id, []).append(command)

    return SyncPlan(
        global_commands=tuple(global_commands),
        scoped_commands={guild_id: tuple(items) for guild_id, items in scoped.items()},
    )


@dataclass(frozen=True, slots=True)
class SyncReport:
    """Resultado (parcial ou final) de uma passagem."""

    state: SyncState = SyncState.IDLE
    global_count: int = 0
    scope_counts: Mapping[str, int] = field(default_factory=dict)
    failed_partition: str | None = None
    not_attempted: tuple[str, ...] = ()

    @property
    def completed_scopes(self) -> tuple[str, ...]:
        return tuple(self.scope_counts)

    @property
    def succeeded(self) -> bool:
        return self.state == SyncState.DONE


def _serialize(commands: Sequence[RegisteredCommand]) -> list[dict[str, Any]]:
    return [command.to_payload() for command in commands]


class CommandSynchronizer:
    """Executa passagens de sincronização do registro.

    Passagens concorrentes na mesma instância são serializadas; o
    transporte pode ser compartilhado com outras partes do programa.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        transport: DispatchTransport,
        application_id: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Inicializa o sincronizador.

        Args:
            registry: Registro de comandos a sincronizar
            transport: Transporte da API
            application_id: Id da aplicação; se ausente usa settings ou /oauth2/applications/@me
            settings: Configurações (default: get_settings())
        """
        self._registry = registry
        self._transport = transport
        self._settings = settings or get_settings()
        self._application_id = application_id or self._settings.discord_application_id
        self._state = SyncState.IDLE
        self._lock = asyncio.Lock()
        self.last_report: SyncReport | None = None

    @property
    def state(self) -> SyncState:
        return self._state

    def _advance(self, event: SyncEvent) -> None:
        is_valid, next_state, reason = validate_transition(self._state, event)
        if not is_valid or next_state is None:
            raise RuntimeError(f"Transição inválida na sincronização: {reason}")
        logger.debug(
            "Transição de sincronização",
            extra={"from_state": self._state.value, "event": event.value, "to_state": next_state.value},
        )
        self._state = next_state

    def _publish(self, report: SyncReport) -> SyncReport:
        self.last_report = report
        return report

    async def _resolve_application_id(self) -> str:
        if not self._application_id:
            _, data = await self._transport.request(routes.current_application())
            self._application_id = Application.model_validate(data).id
            logger.info("Aplicação resolvida", extra={"application_id": self._application_id})
        return self._application_id

    async def synchronize(
        self,
        default_scope: DefaultScopeConfig | Iterable[str | int] | bool | None = None,
    ) -> SyncReport:
        """Sincroniza o registro com a API.

        Args:
            default_scope: Destino dos comandos com escopo padrão; None usa
                COMMAND_DEFAULT_GUILD_IDS / COMMAND_DEFAULT_GLOBAL das settings

        Returns:
            SyncReport com state DONE

        Raises:
            ConfigurationError: Comando com escopo padrão sem configuração (sem I/O)
            RegistryLockedError: Registro já fechado por outra sincronização
            CommandSyncError: Bulk-replace falhou; contém a partição e as não tentadas
        """
        async with self._lock:
            with correlation_scope(), self._registry.sealed() as commands:
                self._state = SyncState.IDLE
                self._advance(SyncEvent.SYNC_REQUESTED)
                plan = self._partition(commands, default_scope)
                return await self._run(plan)

    def _partition(
        self,
        commands: Sequence[RegisteredCommand],
        default_scope: DefaultScopeConfig | Iterable[str | int] | bool | None,
    ) -> SyncPlan:
        config = DefaultScopeConfig.coerce(default_scope)
        if config is None:
            config = DefaultScopeConfig.from_settings(self._settings)
        try:
            plan = build_sync_plan(commands, config)
        except ConfigurationError:
            self._advance(SyncEvent.PLAN_REJECTED)
            raise

        self._publish(SyncReport(state=self._state, not_attempted=plan.scope_worklist))
        logger.info(
            "Plano de sincronização montado",
            extra={
                "global_count": len(plan.global_commands),
                "scopes": list(plan.scope_worklist),
                "total_commands": len(commands),
            },
        )
        return plan

    async def _run(self, plan: SyncPlan) -> SyncReport:
        report = self.last_report or SyncReport()

        if plan.global_commands:
            self._advance(SyncEvent.GLOBAL_PENDING)
            await self._commit(GLOBAL_PARTITION, plan.global_commands, report)
            report = self._publish(
                replace(report, state=self._state, global_count=len(plan.global_commands))
            )

        if plan.scope_worklist:
            self._advance(SyncEvent.SCOPES_PENDING)
            for guild_id in plan.scope_worklist:
                commands = plan.scoped_commands[guild_id]
                await self._commit(guild_id, commands, report)
                report = self._publish(
                    replace(
                        report,
                        state=self._state,
                        scope_counts={**report.scope_counts, guild_id: len(commands)},
                        not_attempted=tuple(g for g in report.not_attempted if g != guild_id),
                    )
                )

        self._advance(SyncEvent.NOTHING_PENDING)
        report = self._publish(replace(report, state=self._state))
        logger.info(
            "Comandos sincronizados",
            extra={"global_count": report.global_count, "scope_counts": dict(report.scope_counts)},
        )
        return report

    async def _route_for(self, partition: str) -> Route:
        application_id = await self._resolve_application_id()
        if partition == GLOBAL_PARTITION:
            return routes.global_commands(application_id)
        return routes.guild_commands(application_id, partition)

    async def _commit(
        self,
        partition: str,
        commands: Sequence[RegisteredCommand],
        report: SyncReport,
    ) -> None:
        """Envia um bulk-replace e registra o resultado.

        Raises:
            CommandSyncError: Em RemoteError (estado vai para FAILED)
        """
        body = _serialize(commands)
        try:
            route = await self._route_for(partition)
            with timed("command_sync", partition=partition, command_count=len(commands)):
                await self._transport.request(route, body)
        except RemoteError as exc:
            self._advance(SyncEvent.REMOTE_FAILED)
            failed = self._publish(
                replace(
                    report,
                    state=self._state,
                    failed_partition=partition,
                    not_attempted=tuple(g for g in report.not_attempted if g != partition),
                )
            )
            logger.error(
                "Falha ao sincronizar partição",
                extra={
                    "partition": partition,
                    "status_code": exc.status,
                    "error_code": exc.code,
                    "not_attempted": list(failed.not_attempted),
                },
            )
            raise CommandSyncError(partition, exc, failed) from exc

        logger.info(
            "Comandos registrados",
            extra={
                "partition": partition,
                "count": len(commands),
                "command_names": [command.name for command in commands],
            },
        )
