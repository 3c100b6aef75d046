"""Interfaces e utilidades base para builders de payload."""

from __future__ import annotations

from typing import Any, Protocol

from guildwire.adapters.discord.models import AllowedMentions, OutboundMessageRequest


class PayloadBuilder(Protocol):
    """Protocolo para builders de uma parte do payload."""

    def build(
        self,
        request: OutboundMessageRequest,
        default_allowed_mentions: AllowedMentions | None = None,
    ) -> dict[str, Any]:
        """Constrói o trecho do payload.

        Args:
            request: Requisição de envio
            default_allowed_mentions: Política padrão do cliente

        Returns:
            Payload parcial (será mesclado com base)
        """
        ...


def build_base_payload(request: OutboundMessageRequest) -> dict[str, Any]:
    """Constrói payload base comum a todas as mensagens.

    `tts` é sempre enviado; `content` e `flags` apenas quando presentes.
    """
    payload: dict[str, Any] = {}
    if request.content is not None:
        payload["content"] = request.content
    payload["tts"] = request.tts
    if request.flags is not None:
        payload["flags"] = request.flags
    return payload
