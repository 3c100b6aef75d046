"""Builders para embeds, menções permitidas e referência de resposta."""

from __future__ import annotations

from typing import Any

from guildwire.adapters.discord.models import AllowedMentions, OutboundMessageRequest


class EmbedsPayloadBuilder:
    """Serializa a lista de embeds."""

    def build(
        self,
        request: OutboundMessageRequest,
        default_allowed_mentions: AllowedMentions | None = None,
    ) -> dict[str, Any]:
        if not request.embeds:
            return {}
        return {"embeds": [embed.to_payload() for embed in request.embeds]}


class MentionsPayloadBuilder:
    """Menções permitidas e referência de resposta.

    Sem política na mensagem nem padrão do cliente, allowed_mentions é
    omitido e vale o padrão da API (todas as menções do conteúdo).
    """

    def build(
        self,
        request: OutboundMessageRequest,
        default_allowed_mentions: AllowedMentions | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        mentions = request.allowed_mentions or default_allowed_mentions
        if mentions is not None:
            payload["allowed_mentions"] = mentions.to_payload(default_allowed_mentions)
        if request.reference:
            payload["message_reference"] = request.reference.to_payload()
        return payload
