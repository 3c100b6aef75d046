"""Cliente outbound para envio e leitura de mensagens em canais Discord.

Responsabilidade:
- Orquestrar validação, construção de payload e codificação do corpo
- Enviar via DispatchTransport (compartilhado e reentrante)
- Converter respostas em Message
- Evitar exposição de conteúdo em logs (apenas ids e contagens)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from guildwire.adapters.discord import routes
from guildwire.adapters.discord.encoder import Attachment, encode_message
from guildwire.adapters.discord.models import AllowedMentions, Message, OutboundMessageRequest
from guildwire.adapters.discord.validators import (
    validate_history_query,
    validate_outbound_message,
)
from guildwire.domain.protocols import DispatchTransport
from guildwire.observability.logging import get_logger

if TYPE_CHECKING:
    from guildwire.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


class DiscordOutboundClient:
    """Cliente para mensagens em canais.

    Erros remotos (RemoteError) propagam sem alteração ao chamador.
    """

    def __init__(
        self,
        transport: DispatchTransport,
        default_allowed_mentions: AllowedMentions | None = None,
    ) -> None:
        """Inicializa o cliente.

        Args:
            transport: Transporte da API (ex.: DiscordHttpClient)
            default_allowed_mentions: Política aplicada quando a mensagem não define a sua;
                None omite allowed_mentions nessas mensagens (padrão da API)
        """
        self._transport = transport
        self.default_allowed_mentions = default_allowed_mentions

    async def send_message(
        self,
        channel_id: str,
        request: OutboundMessageRequest,
        attachments: Sequence[Attachment] = (),
        guild_id: str | None = None,
    ) -> Message:
        """Envia mensagem ao canal.

        Args:
            channel_id: Canal de destino
            request: Conteúdo, embeds, menções, resposta e componentes
            attachments: Arquivos em ordem de envio
            guild_id: Guild do canal (preenchido no Message retornado)

        Returns:
            Message criada pela API

        Raises:
            ValidationError: Mensagem vazia
            ComponentError: Componente inválido no layout
            StreamReadError: Falha ao ler algum anexo
            RemoteError: Status não-sucesso da API
        """
        validate_outbound_message(request, attachments)
        body = encode_message(
            request,
            tuple(attachments),
            channel_id=channel_id,
            default_allowed_mentions=self.default_allowed_mentions,
        )

        _, data = await self._transport.request(routes.channel_messages(channel_id), body)

        logger.info(
            "Mensagem enviada",
            extra={
                "channel_id": channel_id,
                "body_kind": body.kind.value,
                "attachments": len(attachments),
                "embeds": len(request.embeds),
            },
        )
        return Message.from_api(data, guild_id)

    async def fetch_message(
        self,
        channel_id: str,
        message_id: str,
        guild_id: str | None = None,
    ) -> Message:
        _, data = await self._transport.request(routes.channel_message(channel_id, message_id))
        return Message.from_api(data, guild_id)

    async def fetch_messages(
        self,
        channel_id: str,
        limit: int = 50,
        before: str | None = None,
        after: str | None = None,
        around: str | None = None,
        guild_id: str | None = None,
    ) -> list[Message]:
        """Lê o histórico do canal (no máximo uma âncora entre before/after/around).

        Raises:
            ValidationError: limit fora de 1-100 ou mais de uma âncora
        """
        anchors = {"before": before, "after": after, "around": around}
        validate_history_query(limit, anchors)

        params: dict[str, Any] = {"limit": limit}
        params.update({name: value for name, value in anchors.items() if value is not None})
        route = routes.channel_messages(channel_id, method="GET", query=urlencode(params))

        _, data = await self._transport.request(route)
        return [Message.from_api(item, guild_id) for item in data or []]

    async def delete_channel(self, channel_id: str) -> None:
        """Remove o canal (ou fecha a DM)."""
        await self._transport.request(routes.channel(channel_id))
        logger.info("Canal removido", extra={"channel_id": channel_id})


def create_discord_outbound_client(
    settings: Settings,
    transport: DispatchTransport,
) -> DiscordOutboundClient:
    """Factory com a política de menções padrão vinda das settings."""
    default_mentions = AllowedMentions.from_parse(
        settings.allowed_mentions_parse,
        replied_user=settings.allowed_mentions_replied_user,
    )
    return DiscordOutboundClient(transport, default_allowed_mentions=default_mentions)
