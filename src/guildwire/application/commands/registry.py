"""Registro ordenado de comandos de aplicação.

Ciclo de vida explícito:
- OPEN: aceita registros (síncronos, sem I/O)
- SYNCING: somente leitura enquanto uma sincronização lê o registro

A ordem de registro é preservada (logs determinísticos), mas não
altera a semântica remota. Unicidade de nomes entre comandos raiz não
é verificada localmente; a API rejeita duplicatas no bulk-replace.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Generator, Iterator, Sequence
from enum import StrEnum

from guildwire.adapters.discord.errors import CommandValidationError, RegistryLockedError
from guildwire.adapters.discord.validators import (
    validate_description,
    validate_name,
    validate_options,
)
from guildwire.application.commands.models import Command, GroupCommand, RegisteredCommand
from guildwire.domain.commands import CommandOption, coerce_scope
from guildwire.domain.enums import CommandKind
from guildwire.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

_CONTEXT_MENU_KINDS: dict[str, CommandKind] = {
    "user": CommandKind.USER,
    "message": CommandKind.MESSAGE,
}


class RegistryPhase(StrEnum):
    OPEN = "open"
    SYNCING = "syncing"


def _context_menu_kind(kind: CommandKind | str) -> CommandKind:
    if isinstance(kind, str):
        resolved = _CONTEXT_MENU_KINDS.get(kind.lower())
        if resolved is None:
            raise CommandValidationError(f"Tipo de menu de contexto desconhecido: {kind}")
        return resolved
    if kind not in (CommandKind.USER, CommandKind.MESSAGE):
        raise CommandValidationError(f"Menu de contexto deve ser USER ou MESSAGE, recebido {kind!r}")
    return CommandKind(kind)


class CommandRegistry:
    """Coleção ordenada de comandos raiz de um processo.

    Uso típico:
        registry = CommandRegistry()
        registry.register_slash("ping", "Responde pong", scope=GLOBAL)
        admin = registry.register_group("admin", "Administração")
        admin.register_slash("ban", "Bane um membro", options=[...])
    """

    def __init__(self) -> None:
        self._commands: list[RegisteredCommand] = []
        self._phase = RegistryPhase.OPEN

    @property
    def phase(self) -> RegistryPhase:
        return self._phase

    @property
    def commands(self) -> tuple[RegisteredCommand, ...]:
        """Snapshot imutável na ordem de registro."""
        return tuple(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[RegisteredCommand]:
        return iter(self.commands)

    def _ensure_open(self) -> None:
        if self._phase is not RegistryPhase.OPEN:
            raise RegistryLockedError(
                "Registro de comandos fechado durante a sincronização"
            )

    def _append(self, command: RegisteredCommand) -> None:
        self._commands.append(command)
        logger.debug(
            "Comando registrado",
            extra={
                "command_name": command.name,
                "command_kind": command.kind.name,
                "scope": type(command.scope).__name__,
                "position": len(self._commands),
            },
        )

    def register_slash(
        self,
        name: str,
        description: str,
        options: Sequence[CommandOption] = (),
        scope: object = None,
    ) -> Command:
        """Registra um comando slash raiz.

        Args:
            name: Nome (minúsculo, 1-32 caracteres)
            description: Descrição (1-100 caracteres)
            options: Opções do comando
            scope: CommandScope ou tri-state legado (None/False/ids)

        Returns:
            Command criado

        Raises:
            CommandValidationError: Declaração inválida
            RegistryLockedError: Sincronização em andamento
        """
        self._ensure_open()
        validate_name(name)
        validate_description(description, name)
        validate_options(options, name)
        command = Command(
            name=name,
            description=description,
            kind=CommandKind.SLASH,
            scope=coerce_scope(scope),
            options=tuple(options),
        )
        self._append(command)
        return command

    def register_group(
        self,
        name: str,
        description: str,
        scope: object = None,
    ) -> GroupCommand:
        """Registra um grupo raiz; filhos são declarados no nó retornado."""
        self._ensure_open()
        validate_name(name)
        validate_description(description, name)
        group = GroupCommand(
            name=name,
            description=description,
            scope=coerce_scope(scope),
            _guard=self._ensure_open,
        )
        self._append(group)
        return group

    def register_context_menu(
        self,
        name: str,
        kind: CommandKind | str,
        scope: object = None,
    ) -> Command:
        """Registra um menu de contexto de usuário ou de mensagem.

        Args:
            name: Nome exibido (1-32 caracteres, espaços permitidos)
            kind: CommandKind.USER/MESSAGE ou "user"/"message"
            scope: CommandScope ou tri-state legado
        """
        self._ensure_open()
        resolved = _context_menu_kind(kind)
        validate_name(name, resolved)
        command = Command(name=name, kind=resolved, scope=coerce_scope(scope))
        self._append(command)
        return command

    @contextlib.contextmanager
    def sealed(self) -> Generator[tuple[RegisteredCommand, ...], None, None]:
        """Fecha o registro enquanto o bloco executa e entrega o snapshot.

        Raises:
            RegistryLockedError: Se outra sincronização já fechou o registro
        """
        self._ensure_open()
        self._phase = RegistryPhase.SYNCING
        try:
            yield self.commands
        finally:
            self._phase = RegistryPhase.OPEN
