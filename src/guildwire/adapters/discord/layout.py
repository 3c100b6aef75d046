"""Agrupamento de componentes interativos em linhas (action rows).

Regras de posicionamento:
- Grupo explícito (list/tuple) fecha a linha corrente e vira linha(s) própria(s)
- Controle exclusivo (SelectMenu) fecha a linha corrente e ocupa uma linha sozinho
- Controles simples (Button) se acumulam na linha corrente
- Linhas vazias são descartadas; a ordem de entrada é preservada

Funções puras: mesma entrada, mesma partição. O limite de itens por linha
é responsabilidade da API remota (erro remoto), não validado aqui.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from guildwire.adapters.discord.components import Button, Component, SelectMenu, is_exclusive
from guildwire.adapters.discord.errors import ComponentError
from guildwire.domain.enums import ComponentType

Row = list[Component]


def _walk(elements: Iterable[Any]) -> Iterator[Row]:
    """Percorre a entrada uma vez, emitindo linhas (inclusive vazias)."""
    current: Row = []
    for element in elements:
        if isinstance(element, list | tuple):
            yield current
            current = []
            yield from _walk(element)
        elif isinstance(element, SelectMenu | Button):
            if is_exclusive(element):
                yield current
                current = []
                yield [element]
            else:
                current.append(element)
        else:
            raise ComponentError(f"Elemento interativo não suportado: {type(element).__name__}")
    yield current


def build_rows(elements: Iterable[Any]) -> list[Row]:
    """Converte a lista declarativa de componentes em linhas.

    Args:
        elements: Componentes em ordem; list/tuple marcam uma linha explícita

    Returns:
        Linhas não vazias, na ordem de encontro

    Raises:
        ComponentError: Se houver elemento que não é componente nem grupo
    """
    return [row for row in _walk(elements) if row]


def flatten_rows(rows: Sequence[Sequence[Component]]) -> list[tuple[Component, ...]]:
    """Achata linhas preservando as fronteiras como grupos explícitos."""
    return [tuple(row) for row in rows]


def rows_to_components(rows: Sequence[Sequence[Component]]) -> list[dict[str, Any]]:
    """Serializa linhas no formato de action rows da API."""
    return [
        {
            "type": int(ComponentType.ACTION_ROW),
            "components": [component.to_payload() for component in row],
        }
        for row in rows
        if row
    ]
