"""Testes para DiscordOutboundClient (envio e leitura de mensagens)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from guildwire.adapters.discord.components import Button
from guildwire.adapters.discord.encoder import Attachment, JsonBody, MultipartBody
from guildwire.adapters.discord.errors import RemoteError, StreamReadError, ValidationError
from guildwire.adapters.discord.http_client import DiscordHttpClient
from guildwire.adapters.discord.models import AllowedMentions, Message, OutboundMessageRequest
from guildwire.adapters.discord.outbound import (
    DiscordOutboundClient,
    create_discord_outbound_client,
)
from guildwire.infra.http import HttpClientConfig

MESSAGE_DATA = {"id": "900", "channel_id": "10", "content": "hi", "author": {"id": "1"}}


class _BrokenStream:
    def read(self) -> bytes:
        raise OSError("closed")


@pytest.fixture()
def transport() -> AsyncMock:
    mock = AsyncMock()
    mock.request.return_value = (200, MESSAGE_DATA)
    return mock


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_json_body_without_attachments(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport, AllowedMentions(users=True))

        message = await client.send_message("10", OutboundMessageRequest(content="hi"), guild_id="5")

        route, body = transport.request.await_args.args
        assert route.method == "POST"
        assert route.path == "/channels/10/messages"
        assert isinstance(body, JsonBody)
        assert json.loads(body.render()) == {
            "content": "hi",
            "tts": False,
            "allowed_mentions": {"parse": ["users"]},
        }
        assert isinstance(message, Message)
        assert message.id == "900"
        assert message.guild_id == "5"

    @pytest.mark.asyncio
    async def test_multipart_with_attachments_and_components(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport)
        request = OutboundMessageRequest(content="arquivo", components=[Button(label="Ok", custom_id="ok")])

        await client.send_message("10", request, [Attachment.from_bytes("a.png", b"png")])

        _, body = transport.request.await_args.args
        assert isinstance(body, MultipartBody)
        assert body.boundary.startswith("GuildwireChannels10MessagesPost")
        document = json.loads(body.parts[0].data)
        assert document["components"][0]["components"][0]["custom_id"] == "ok"

    @pytest.mark.asyncio
    async def test_attachment_only_message_is_valid(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport)

        await client.send_message("10", OutboundMessageRequest(), [Attachment.from_bytes("a.txt", b"x")])

        transport.request.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_message_rejected_before_send(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport)

        with pytest.raises(ValidationError):
            await client.send_message("10", OutboundMessageRequest())

        transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stream_error_before_send(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport)

        with pytest.raises(StreamReadError):
            await client.send_message("10", OutboundMessageRequest(content="x"), [Attachment("a", _BrokenStream())])

        transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remote_error_propagates(self, transport: AsyncMock) -> None:
        transport.request.side_effect = RemoteError(403, {"code": 50013}, None)
        client = DiscordOutboundClient(transport)

        with pytest.raises(RemoteError) as exc_info:
            await client.send_message("10", OutboundMessageRequest(content="x"))

        assert exc_info.value.code == 50013


class TestFetchMessages:
    @pytest.mark.asyncio
    async def test_fetch_single_message(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport)

        message = await client.fetch_message("10", "900")

        route = transport.request.await_args.args[0]
        assert (route.method, route.path) == ("GET", "/channels/10/messages/900")
        assert message.author_id == "1"

    @pytest.mark.asyncio
    async def test_history_query_uses_single_anchor(self, transport: AsyncMock) -> None:
        transport.request.return_value = (200, [MESSAGE_DATA, {**MESSAGE_DATA, "id": "901"}])
        client = DiscordOutboundClient(transport)

        messages = await client.fetch_messages("10", limit=2, before="950")

        route = transport.request.await_args.args[0]
        assert route.path == "/channels/10/messages?limit=2&before=950"
        assert route.key == "/channels/:channel_id/messages"
        assert [m.id for m in messages] == ["900", "901"]

    @pytest.mark.asyncio
    async def test_multiple_anchors_rejected(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport)

        with pytest.raises(ValidationError):
            await client.fetch_messages("10", before="1", after="2")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 101])
    async def test_limit_out_of_range(self, transport: AsyncMock, limit: int) -> None:
        client = DiscordOutboundClient(transport)

        with pytest.raises(ValidationError):
            await client.fetch_messages("10", limit=limit)


class TestDeleteChannel:
    @pytest.mark.asyncio
    async def test_delete_channel(self, transport: AsyncMock) -> None:
        transport.request.return_value = (200, {"id": "10"})
        client = DiscordOutboundClient(transport)

        await client.delete_channel("10")

        route = transport.request.await_args.args[0]
        assert (route.method, route.path) == ("DELETE", "/channels/10")


class TestCreateDiscordOutboundClient:
    def test_default_mentions_from_settings(self, transport: AsyncMock, settings) -> None:
        client = create_discord_outbound_client(settings, transport)

        assert client.default_allowed_mentions.to_payload() == {
            "parse": ["users", "roles"],
            "replied_user": True,
        }


class TestAllowedMentionsPolicy:
    @pytest.mark.asyncio
    async def test_client_without_default_leaves_mentions_to_api(self, transport: AsyncMock) -> None:
        client = DiscordOutboundClient(transport)

        await client.send_message("10", OutboundMessageRequest(content="<@1> oi"))

        _, body = transport.request.await_args.args
        assert "allowed_mentions" not in json.loads(body.render())


class TestSendOverHttp:
    @pytest.mark.asyncio
    async def test_bad_gateway_does_not_duplicate_message(self) -> None:
        methods: list[str] = []
        statuses = iter([502, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            return httpx.Response(next(statuses), json=MESSAGE_DATA)

        http = DiscordHttpClient(
            config=HttpClientConfig(max_retries=3, backoff_base_seconds=0.0),
            token="t",
            base_url="https://discord.test/api/v10",
            transport=httpx.MockTransport(handler),
        )
        async with http:
            with pytest.raises(RemoteError) as exc_info:
                await DiscordOutboundClient(http).send_message("10", OutboundMessageRequest(content="oi"))

        assert methods == ["POST"]
        assert exc_info.value.status == 502
