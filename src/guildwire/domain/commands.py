"""Tipos de domínio para comandos de aplicação.

Escopo de registro é uma união explícita:
- GlobalScope: registro mundial (opt-in explícito)
- ScopedTo(ids): restrito a guilds específicas (conjunto vazio = global)
- DefaultScope: não resolvido; decidido na sincronização pela configuração

Opções de comando são estruturas etiquetadas (OptionKind) e não dicts livres;
a validação canônica fica em adapters/discord/validators/command.py.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias

from guildwire.domain.enums import OptionKind


@dataclass(frozen=True, slots=True)
class GlobalScope:
    """Comando registrado para toda a aplicação."""


@dataclass(frozen=True, slots=True)
class ScopedTo:
    """Comando restrito a um conjunto de guilds."""

    ids: frozenset[str]


@dataclass(frozen=True, slots=True)
class DefaultScope:
    """Escopo ainda não resolvido."""


CommandScope: TypeAlias = GlobalScope | ScopedTo | DefaultScope

GLOBAL = GlobalScope()
DEFAULT = DefaultScope()


def scoped_to(*ids: str | int) -> ScopedTo:
    """Atalho para ScopedTo normalizando ids como string."""
    return ScopedTo(frozenset(str(i) for i in ids))


def coerce_scope(value: CommandScope | Iterable[str | int] | str | int | bool | None) -> CommandScope:
    """Converte o tri-state legado (None/False/lista) em CommandScope.

    - None → DefaultScope
    - False → GlobalScope
    - id único (str/int) → ScopedTo({id})
    - iterável de ids → ScopedTo(ids); vazio equivale a global na partição

    Raises:
        TypeError: Se True ou tipo não suportado
    """
    if isinstance(value, GlobalScope | ScopedTo | DefaultScope):
        return value
    if value is None:
        return DEFAULT
    if value is False:
        return GLOBAL
    if value is True:
        raise TypeError("scope=True é ambíguo; use GLOBAL ou uma lista de guild ids")
    if isinstance(value, str | int):
        return scoped_to(value)
    if isinstance(value, Iterable):
        return scoped_to(*value)
    raise TypeError(f"Escopo não suportado: {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class CommandOption:
    """Opção (parâmetro) de um comando slash."""

    name: str
    description: str
    kind: OptionKind = OptionKind.STRING
    required: bool = True
    choices: Mapping[str, str | int | float] = field(default_factory=lambda: MappingProxyType({}))
    channel_types: tuple[int, ...] = ()
    min_value: int | float | None = None
    max_value: int | float | None = None
    min_length: int | None = None
    max_length: int | None = None
    autocomplete: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Serializa no formato da API (campos ausentes são omitidos)."""
        payload: dict[str, Any] = {
            "type": int(self.kind),
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }
        if self.choices:
            payload["choices"] = [{"name": k, "value": v} for k, v in self.choices.items()]
        if self.channel_types:
            payload["channel_types"] = list(self.channel_types)
        if self.min_value is not None:
            payload["min_value"] = self.min_value
        if self.max_value is not None:
            payload["max_value"] = self.max_value
        if self.min_length is not None:
            payload["min_length"] = self.min_length
        if self.max_length is not None:
            payload["max_length"] = self.max_length
        if self.autocomplete:
            payload["autocomplete"] = True
        return payload
