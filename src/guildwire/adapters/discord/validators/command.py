"""Validação canônica de comandos de aplicação e suas opções."""

from __future__ import annotations

from collections.abc import Sequence

from guildwire.adapters.discord.errors import CommandValidationError
from guildwire.adapters.discord.validators.limits import (
    MAX_CHOICE_NAME_LENGTH,
    MAX_CHOICES_PER_OPTION,
    MAX_COMMAND_NAME_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_OPTIONS_PER_COMMAND,
    MAX_STRING_OPTION_LENGTH,
    SLASH_NAME_PATTERN,
)
from guildwire.domain.commands import CommandOption
from guildwire.domain.enums import (
    CHOICE_OPTION_KINDS,
    NUMERIC_OPTION_KINDS,
    CommandKind,
    OptionKind,
)

# Tipos de valor aceitos em choices por tipo de opção
_CHOICE_VALUE_TYPES: dict[OptionKind, tuple[type, ...]] = {
    OptionKind.STRING: (str,),
    OptionKind.INTEGER: (int,),
    OptionKind.NUMBER: (int, float),
}


def validate_name(name: str, kind: CommandKind = CommandKind.SLASH) -> None:
    """Valida nome de comando (ou opção, que segue a regra slash).

    Raises:
        CommandValidationError: Se o nome viola o formato do tipo
    """
    if kind == CommandKind.SLASH:
        if not SLASH_NAME_PATTERN.match(name) or name != name.lower():
            raise CommandValidationError(
                f"Nome inválido '{name}': use 1-32 caracteres minúsculos, '-' ou '_'"
            )
        return
    if not 1 <= len(name) <= MAX_COMMAND_NAME_LENGTH:
        raise CommandValidationError(
            f"Nome de menu de contexto deve ter 1-{MAX_COMMAND_NAME_LENGTH} caracteres"
        )


def validate_description(description: str, owner: str) -> None:
    if not 1 <= len(description) <= MAX_DESCRIPTION_LENGTH:
        raise CommandValidationError(
            f"Descrição de '{owner}' deve ter 1-{MAX_DESCRIPTION_LENGTH} caracteres"
        )


def _validate_choices(option: CommandOption) -> None:
    if option.kind not in CHOICE_OPTION_KINDS:
        raise CommandValidationError(f"Opção '{option.name}' ({option.kind.name}) não aceita choices")
    if option.autocomplete:
        raise CommandValidationError(f"Opção '{option.name}': choices e autocomplete são exclusivos")
    if len(option.choices) > MAX_CHOICES_PER_OPTION:
        raise CommandValidationError(
            f"Opção '{option.name}' excede {MAX_CHOICES_PER_OPTION} choices"
        )
    expected = _CHOICE_VALUE_TYPES[option.kind]
    for choice_name, value in option.choices.items():
        if not 1 <= len(choice_name) <= MAX_CHOICE_NAME_LENGTH:
            raise CommandValidationError(f"Choice '{choice_name}' com nome fora do limite")
        if isinstance(value, bool) or not isinstance(value, expected):
            raise CommandValidationError(
                f"Choice '{choice_name}' da opção '{option.name}' tem valor incompatível com {option.kind.name}"
            )


def _validate_range(option: CommandOption) -> None:
    has_range = option.min_value is not None or option.max_value is not None
    if has_range and option.kind not in NUMERIC_OPTION_KINDS:
        raise CommandValidationError(f"Opção '{option.name}': min/max_value só para INTEGER/NUMBER")
    if (
        option.min_value is not None
        and option.max_value is not None
        and option.min_value > option.max_value
    ):
        raise CommandValidationError(f"Opção '{option.name}': min_value maior que max_value")

    has_length = option.min_length is not None or option.max_length is not None
    if has_length and option.kind != OptionKind.STRING:
        raise CommandValidationError(f"Opção '{option.name}': min/max_length só para STRING")
    for bound in (option.min_length, option.max_length):
        if bound is not None and not 0 <= bound <= MAX_STRING_OPTION_LENGTH:
            raise CommandValidationError(f"Opção '{option.name}': tamanho fora de 0-{MAX_STRING_OPTION_LENGTH}")
    if (
        option.min_length is not None
        and option.max_length is not None
        and option.min_length > option.max_length
    ):
        raise CommandValidationError(f"Opção '{option.name}': min_length maior que max_length")


def validate_option(option: CommandOption) -> None:
    """Valida uma opção de comando slash.

    Raises:
        CommandValidationError: Se a combinação de campos é inválida para o tipo
    """
    if option.kind in (OptionKind.SUB_COMMAND, OptionKind.SUB_COMMAND_GROUP):
        raise CommandValidationError(
            f"Opção '{option.name}': subcomandos são declarados via register_group"
        )
    validate_name(option.name)
    validate_description(option.description, option.name)
    if option.choices:
        _validate_choices(option)
    _validate_range(option)
    if option.channel_types and option.kind != OptionKind.CHANNEL:
        raise CommandValidationError(f"Opção '{option.name}': channel_types só para CHANNEL")
    if option.autocomplete and option.kind not in CHOICE_OPTION_KINDS:
        raise CommandValidationError(
            f"Opção '{option.name}': autocomplete só para STRING/INTEGER/NUMBER"
        )


def validate_options(options: Sequence[CommandOption], owner: str) -> None:
    """Valida a lista de opções de um comando (tamanho, nomes únicos, cada opção)."""
    if len(options) > MAX_OPTIONS_PER_COMMAND:
        raise CommandValidationError(f"'{owner}' excede {MAX_OPTIONS_PER_COMMAND} opções")
    seen: set[str] = set()
    for option in options:
        validate_option(option)
        if option.name in seen:
            raise CommandValidationError(f"'{owner}' declara a opção '{option.name}' duas vezes")
        seen.add(option.name)


def validate_children(owner: str, existing: Sequence[str], new_name: str) -> None:
    """Valida inclusão de filho em grupo: limite e nome único dentro do grupo."""
    if len(existing) >= MAX_OPTIONS_PER_COMMAND:
        raise CommandValidationError(f"Grupo '{owner}' excede {MAX_OPTIONS_PER_COMMAND} filhos")
    if new_name in existing:
        raise CommandValidationError(f"Grupo '{owner}' já possui o filho '{new_name}'")
