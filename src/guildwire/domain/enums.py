"""Enums de domínio para componentes interativos e comandos de aplicação Discord."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class ComponentType(IntEnum):
    """Tipos de componente de mensagem conforme API Discord."""

    ACTION_ROW = 1
    BUTTON = 2
    STRING_SELECT = 3


class ButtonStyle(IntEnum):
    """Estilos de botão.

    - primary/secondary/success/danger: exigem custom_id
    - link: exige url e não emite interação
    """

    PRIMARY = 1
    SECONDARY = 2
    SUCCESS = 3
    DANGER = 4
    LINK = 5


class CommandKind(IntEnum):
    """Tipos de comando de aplicação (slash e menus de contexto)."""

    SLASH = 1
    USER = 2
    MESSAGE = 3


class OptionKind(IntEnum):
    """Tipos de opção de comando slash."""

    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


class AllowedMentionType(StrEnum):
    """Categorias aceitas em allowed_mentions.parse."""

    EVERYONE = "everyone"
    USERS = "users"
    ROLES = "roles"


# Opções que aceitam lista de choices
CHOICE_OPTION_KINDS = frozenset({OptionKind.STRING, OptionKind.INTEGER, OptionKind.NUMBER})

# Opções numéricas (min_value/max_value)
NUMERIC_OPTION_KINDS = frozenset({OptionKind.INTEGER, OptionKind.NUMBER})
