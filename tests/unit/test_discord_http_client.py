"""Testes para DiscordHttpClient (transporte da API).

Valida:
- Header Authorization: Bot <token> e User-Agent
- Corpos JSON, JsonBody e MultipartBody
- Tradução de falhas para RemoteError(status, corpo)
- Parsing do erro JSON do Discord
- Logging sem exposição do token
"""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from guildwire.adapters.discord import routes
from guildwire.adapters.discord.encoder import Attachment, encode_body
from guildwire.adapters.discord.errors import RemoteError
from guildwire.adapters.discord.http_client import (
    DiscordHttpClient,
    _parse_discord_error,
    create_discord_http_client,
)
from guildwire.infra.http import HttpClientConfig

TOKEN = "super-secret-token"


def _client(handler) -> DiscordHttpClient:
    return DiscordHttpClient(
        config=HttpClientConfig(max_retries=0),
        token=TOKEN,
        base_url="https://discord.test/api/v10",
        transport=httpx.MockTransport(handler),
    )


class TestParseDiscordError:
    def test_parses_code_and_message(self) -> None:
        error = _parse_discord_error(
            {"code": 50035, "message": "Invalid Form Body", "errors": {"name": {}}}
        )

        assert error is not None
        assert error.code == 50035
        assert error.message == "Invalid Form Body"
        assert error.has_field_errors is True

    def test_non_error_body_returns_none(self) -> None:
        assert _parse_discord_error({"id": "1"}) is None
        assert _parse_discord_error("Bad Gateway") is None
        assert _parse_discord_error(None) is None


class TestDiscordHttpClientRequest:
    @pytest.mark.asyncio
    async def test_json_body_and_auth_header(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"id": "1"}])

        async with _client(handler) as client:
            status, data = await client.request(routes.global_commands("10"), [{"name": "ping"}])

        assert status == 200
        assert data == [{"id": "1"}]
        request = seen[0]
        assert request.method == "PUT"
        assert str(request.url) == "https://discord.test/api/v10/applications/10/commands"
        assert request.headers["Authorization"] == f"Bot {TOKEN}"
        assert json.loads(request.content) == [{"name": "ping"}]

    @pytest.mark.asyncio
    async def test_multipart_body_rendered_with_boundary(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "5", "channel_id": "9"})

        body = encode_body({"content": "hi"}, [Attachment.from_bytes("a.png", b"png")], channel_id="9")

        async with _client(handler) as client:
            await client.request(routes.channel_messages("9"), body)

        request = seen[0]
        assert request.headers["Content-Type"] == body.content_type
        assert request.content == body.render()

    @pytest.mark.asyncio
    async def test_no_content_returns_none(self) -> None:
        async with _client(lambda request: httpx.Response(204)) as client:
            status, data = await client.request(routes.channel("9"))

        assert status == 204
        assert data is None

    @pytest.mark.asyncio
    async def test_error_status_raises_remote_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"code": 50001, "message": "Missing Access"})

        route = routes.guild_commands("10", "42")
        async with _client(handler) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.request(route, [])

        error = exc_info.value
        assert error.status == 403
        assert error.decoded_body == {"code": 50001, "message": "Missing Access"}
        assert error.code == 50001
        assert error.route == route

    @pytest.mark.asyncio
    async def test_transport_failure_has_no_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.request(routes.current_application())

        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_token_never_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"code": 0, "message": "401: Unauthorized"})

        with caplog.at_level(logging.DEBUG):
            async with _client(handler) as client:
                with pytest.raises(RemoteError):
                    await client.request(routes.current_application())

        for record in caplog.records:
            assert TOKEN not in record.getMessage()
            assert TOKEN not in str(record.__dict__)


def _retrying_client(handler) -> DiscordHttpClient:
    return DiscordHttpClient(
        config=HttpClientConfig(max_retries=3, backoff_base_seconds=0.0),
        token=TOKEN,
        base_url="https://discord.test/api/v10",
        transport=httpx.MockTransport(handler),
    )


class TestRetryPolicy:
    """Reenvio conforme método e rota."""

    @pytest.mark.asyncio
    async def test_message_post_not_resent_after_502(self) -> None:
        methods: list[str] = []
        statuses = iter([502, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            return httpx.Response(next(statuses), json={})

        async with _retrying_client(handler) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.request(routes.channel_messages("9"), {"content": "oi"})

        assert methods == ["POST"]
        assert exc_info.value.status == 502

    @pytest.mark.asyncio
    async def test_message_post_not_resent_after_timeout(self) -> None:
        methods: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            raise httpx.ReadTimeout("slow", request=request)

        async with _retrying_client(handler) as client:
            with pytest.raises(RemoteError):
                await client.request(routes.channel_messages("9"), {"content": "oi"})

        assert methods == ["POST"]

    @pytest.mark.asyncio
    async def test_message_post_resent_after_429(self) -> None:
        statuses = iter([429, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(statuses), json={"id": "1"})

        async with _retrying_client(handler) as client:
            status, _ = await client.request(routes.channel_messages("9"), {"content": "oi"})

        assert status == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [429, 500])
    async def test_bulk_replace_sent_once(self, status: int) -> None:
        methods: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            return httpx.Response(status, json={})

        async with _retrying_client(handler) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.request(routes.guild_commands("10", "42"), [])

        assert methods == ["PUT"]
        assert exc_info.value.status == status

    @pytest.mark.asyncio
    async def test_reads_retried_on_5xx(self) -> None:
        statuses = iter([503, 502, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(statuses), json={"id": "7"})

        async with _retrying_client(handler) as client:
            status, data = await client.request(routes.current_application())

        assert status == 200
        assert data == {"id": "7"}


class TestCreateDiscordHttpClient:
    def test_factory_uses_settings(self, settings) -> None:
        client = create_discord_http_client(settings)

        assert client.base_url == "https://discord.com/api/v10"
        assert client._token == "test-bot-token"
        assert client._config.default_headers["User-Agent"] == settings.user_agent
        assert client._config.max_retries == settings.discord_max_retries
