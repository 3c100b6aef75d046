"""Composição do payload JSON completo de uma mensagem."""

from __future__ import annotations

from typing import Any

from guildwire.adapters.discord.models import AllowedMentions, OutboundMessageRequest
from guildwire.adapters.discord.payload_builders.base import (
    PayloadBuilder,
    build_base_payload,
)
from guildwire.adapters.discord.payload_builders.components import (
    ComponentsPayloadBuilder,
)
from guildwire.adapters.discord.payload_builders.message import (
    EmbedsPayloadBuilder,
    MentionsPayloadBuilder,
)

# Ordem de composição (chaves do JSON seguem esta ordem)
_BUILDERS: tuple[PayloadBuilder, ...] = (
    EmbedsPayloadBuilder(),
    MentionsPayloadBuilder(),
    ComponentsPayloadBuilder(),
)


def build_full_payload(
    request: OutboundMessageRequest,
    default_allowed_mentions: AllowedMentions | None = None,
) -> dict[str, Any]:
    """Constrói payload completo para POST /channels/{id}/messages.

    Args:
        request: Requisição de envio
        default_allowed_mentions: Política de menções padrão do cliente

    Returns:
        Documento JSON (dict) pronto para o encoder

    Raises:
        ComponentError: Se a lista de componentes tiver elemento inválido
    """
    payload = build_base_payload(request)
    for builder in _BUILDERS:
        payload.update(builder.build(request, default_allowed_mentions))
    return payload
