"""Componentes interativos de mensagem (botões e menus de seleção).

Classificação usada pelo layout:
- Button: controle simples, divide a linha com outros botões
- SelectMenu: controle exclusivo, ocupa uma linha sozinho
- list/tuple: grupo explícito (o autor iniciou uma nova linha)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from guildwire.adapters.discord.errors import ComponentError
from guildwire.domain.enums import ButtonStyle, ComponentType

_CUSTOM_EMOJI = re.compile(r"^<(a?):(\w+):(\d+)>$")


def emoji_payload(emoji: str) -> dict[str, Any]:
    """Converte emoji unicode ou custom (<:nome:id>) no objeto parcial da API."""
    match = _CUSTOM_EMOJI.match(emoji)
    if match:
        animated, name, emoji_id = match.groups()
        return {"name": name, "id": emoji_id, "animated": bool(animated)}
    return {"name": emoji}


@dataclass(slots=True)
class Button:
    """Botão de mensagem."""

    label: str | None = None
    style: ButtonStyle = ButtonStyle.PRIMARY
    custom_id: str | None = None
    url: str | None = None
    emoji: str | None = None
    disabled: bool = False

    def __post_init__(self) -> None:
        self.style = ButtonStyle(self.style)
        if self.style == ButtonStyle.LINK:
            if not self.url:
                raise ComponentError("Botão LINK exige url")
            if self.custom_id:
                raise ComponentError("Botão LINK não aceita custom_id")
        else:
            if not self.custom_id:
                raise ComponentError(f"Botão {self.style.name} exige custom_id")
            if self.url:
                raise ComponentError("Apenas botões LINK aceitam url")
        if not self.label and not self.emoji:
            raise ComponentError("Botão exige label ou emoji")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(ComponentType.BUTTON),
            "style": int(self.style),
        }
        if self.label:
            payload["label"] = self.label
        if self.emoji:
            payload["emoji"] = emoji_payload(self.emoji)
        if self.style == ButtonStyle.LINK:
            payload["url"] = self.url
        else:
            payload["custom_id"] = self.custom_id
        if self.disabled:
            payload["disabled"] = True
        return payload


@dataclass(slots=True)
class SelectOption:
    """Opção de um menu de seleção."""

    label: str
    value: str
    description: str | None = None
    emoji: str | None = None
    default: bool = False

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"label": self.label, "value": self.value}
        if self.description:
            payload["description"] = self.description
        if self.emoji:
            payload["emoji"] = emoji_payload(self.emoji)
        if self.default:
            payload["default"] = True
        return payload


@dataclass(slots=True)
class SelectMenu:
    """Menu de seleção (string select). Sempre ocupa a linha inteira."""

    custom_id: str
    options: list[SelectOption] = field(default_factory=list)
    placeholder: str | None = None
    min_values: int = 1
    max_values: int = 1
    disabled: bool = False

    def __post_init__(self) -> None:
        if not self.custom_id:
            raise ComponentError("SelectMenu exige custom_id")
        if not self.options:
            raise ComponentError("SelectMenu exige ao menos uma opção")
        if self.min_values < 0 or self.max_values < 1:
            raise ComponentError("min_values deve ser >= 0 e max_values >= 1")
        if self.min_values > self.max_values:
            raise ComponentError("min_values não pode exceder max_values")
        if self.max_values > len(self.options):
            raise ComponentError("max_values não pode exceder o número de opções")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(ComponentType.STRING_SELECT),
            "custom_id": self.custom_id,
            "options": [option.to_payload() for option in self.options],
            "min_values": self.min_values,
            "max_values": self.max_values,
        }
        if self.placeholder:
            payload["placeholder"] = self.placeholder
        if self.disabled:
            payload["disabled"] = True
        return payload


Component: TypeAlias = Button | SelectMenu

# Controles que precisam de uma linha exclusiva
EXCLUSIVE_COMPONENTS: tuple[type, ...] = (SelectMenu,)


def is_exclusive(component: Component) -> bool:
    return isinstance(component, EXCLUSIVE_COMPONENTS)
