"""Nós da árvore de comandos de aplicação.

Estrutura (árvore, nunca grafo):
- Command: slash ou menu de contexto (usuário/mensagem)
- GroupCommand: comando raiz que possui subcomandos e SubcommandGroups
- SubcommandGroup: agrupa subcomandos; não aninha outros grupos

Filhos herdam o escopo da raiz. Cada nó raiz serializa no formato
aceito pelo bulk-replace da API (to_payload).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from guildwire.adapters.discord.errors import CommandValidationError
from guildwire.adapters.discord.validators import (
    validate_children,
    validate_description,
    validate_name,
    validate_options,
)
from guildwire.domain.commands import DEFAULT, CommandOption, CommandScope
from guildwire.domain.enums import CommandKind, OptionKind


def _always_open() -> None:
    return None


def _ordered_options(options: Sequence[CommandOption]) -> list[dict[str, Any]]:
    # Obrigatórias antes das opcionais (ordem estável)
    return [option.to_payload() for option in sorted(options, key=lambda o: not o.required)]


@dataclass(slots=True, eq=False)
class Command:
    """Comando folha (slash, menu de usuário ou menu de mensagem)."""

    name: str
    description: str = ""
    kind: CommandKind = CommandKind.SLASH
    scope: CommandScope = DEFAULT
    options: tuple[CommandOption, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        """Serializa como comando raiz."""
        payload: dict[str, Any] = {"name": self.name, "type": int(self.kind)}
        if self.kind == CommandKind.SLASH:
            payload["description"] = self.description
            payload["options"] = _ordered_options(self.options)
        return payload

    def to_option_payload(self) -> dict[str, Any]:
        """Serializa como subcomando dentro de um grupo."""
        return {
            "type": int(OptionKind.SUB_COMMAND),
            "name": self.name,
            "description": self.description,
            "options": _ordered_options(self.options),
        }


def _new_subcommand(
    owner: str,
    children: list[Any],
    name: str,
    description: str,
    options: Sequence[CommandOption],
    scope: CommandScope,
) -> Command:
    validate_name(name)
    validate_description(description, name)
    validate_options(options, name)
    validate_children(owner, [child.name for child in children], name)
    command = Command(name, description, CommandKind.SLASH, scope, tuple(options))
    children.append(command)
    return command


@dataclass(slots=True, eq=False)
class SubcommandGroup:
    """Grupo de subcomandos (segundo nível)."""

    name: str
    description: str
    scope: CommandScope = DEFAULT
    commands: list[Command] = field(default_factory=list)
    _guard: Callable[[], None] = field(default=_always_open, repr=False)

    def register_slash(
        self,
        name: str,
        description: str,
        options: Sequence[CommandOption] = (),
    ) -> Command:
        """Declara um subcomando neste grupo.

        Raises:
            CommandValidationError: Nome/descrição/opções inválidos ou nome repetido
            RegistryLockedError: Sincronização em andamento
        """
        self._guard()
        return _new_subcommand(self.name, self.commands, name, description, options, self.scope)

    def register_group(self, name: str, description: str) -> SubcommandGroup:
        raise CommandValidationError(
            f"Grupo '{self.name}' já é um subgrupo; '{name}' não pode ser aninhado"
        )

    def to_option_payload(self) -> dict[str, Any]:
        return {
            "type": int(OptionKind.SUB_COMMAND_GROUP),
            "name": self.name,
            "description": self.description,
            "options": [command.to_option_payload() for command in self.commands],
        }


@dataclass(slots=True, eq=False)
class GroupCommand:
    """Comando slash raiz que agrupa subcomandos."""

    name: str
    description: str
    scope: CommandScope = DEFAULT
    children: list[Command | SubcommandGroup] = field(default_factory=list)
    _guard: Callable[[], None] = field(default=_always_open, repr=False)

    @property
    def kind(self) -> CommandKind:
        return CommandKind.SLASH

    def register_slash(
        self,
        name: str,
        description: str,
        options: Sequence[CommandOption] = (),
    ) -> Command:
        """Declara um subcomando direto.

        Raises:
            CommandValidationError: Nome/descrição/opções inválidos ou nome repetido
            RegistryLockedError: Sincronização em andamento
        """
        self._guard()
        return _new_subcommand(self.name, self.children, name, description, options, self.scope)

    def register_group(self, name: str, description: str) -> SubcommandGroup:
        """Declara um subgrupo, que expõe register_slash para seus filhos."""
        self._guard()
        validate_name(name)
        validate_description(description, name)
        validate_children(self.name, [child.name for child in self.children], name)
        group = SubcommandGroup(name, description, self.scope, _guard=self._guard)
        self.children.append(group)
        return group

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": int(CommandKind.SLASH),
            "description": self.description,
            "options": [child.to_option_payload() for child in self.children],
        }


RegisteredCommand: TypeAlias = Command | GroupCommand
