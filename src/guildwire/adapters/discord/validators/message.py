"""Validação estrutural de mensagens outbound."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from guildwire.adapters.discord.errors import ValidationError
from guildwire.adapters.discord.models import OutboundMessageRequest
from guildwire.adapters.discord.validators.limits import MAX_FETCH_LIMIT, MIN_FETCH_LIMIT


def validate_outbound_message(
    request: OutboundMessageRequest,
    attachments: Sequence[Any] = (),
) -> None:
    """Valida que a mensagem carrega algo a enviar.

    Raises:
        ValidationError: Se não houver conteúdo, embeds, componentes nem anexos
    """
    if not (request.content or request.embeds or request.components or attachments):
        raise ValidationError(
            "Mensagem vazia: informe content, embeds, components ou anexos"
        )


def validate_history_query(limit: int, anchors: dict[str, str | None]) -> None:
    """Valida parâmetros de leitura de histórico.

    Raises:
        ValidationError: Se limit fora da faixa ou mais de uma âncora informada
    """
    if not MIN_FETCH_LIMIT <= limit <= MAX_FETCH_LIMIT:
        raise ValidationError(
            f"limit deve estar entre {MIN_FETCH_LIMIT} e {MAX_FETCH_LIMIT}"
        )
    given = [name for name, value in anchors.items() if value is not None]
    if len(given) > 1:
        raise ValidationError(f"Use apenas uma âncora entre before/after/around ({given})")
