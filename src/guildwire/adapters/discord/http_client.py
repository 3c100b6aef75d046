"""Cliente HTTP especializado para a API Discord.

Estende HttpClient genérico com comportamentos específicos:
- Autenticação `Authorization: Bot <token>` (nunca logada)
- User-Agent no formato exigido pela API
- Corpos JSON, JsonBody ou MultipartBody
- Tradução de falhas para RemoteError(status, corpo decodificado)
- Parsing do erro JSON do Discord (code, message, errors) para logs
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from guildwire.adapters.discord.encoder import JsonBody, MultipartBody
from guildwire.adapters.discord.errors import RemoteError
from guildwire.adapters.discord.routes import Route
from guildwire.infra.http import HttpClient, HttpClientConfig, HttpError, decode_body
from guildwire.observability.logging import get_logger

if TYPE_CHECKING:
    import httpx

    from guildwire.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class DiscordApiError:
    """Erro JSON retornado pela API Discord."""

    code: int
    message: str
    has_field_errors: bool


def _parse_discord_error(body: Any) -> DiscordApiError | None:
    """Extrai o erro do corpo da resposta.

    Returns:
        DiscordApiError se o corpo segue o formato de erro, None caso contrário
    """
    if not isinstance(body, dict) or "code" not in body:
        return None
    code = body.get("code")
    return DiscordApiError(
        code=code if isinstance(code, int) else 0,
        message=str(body.get("message", "Erro desconhecido")),
        has_field_errors=bool(body.get("errors")),
    )


def _log_remote_error(route: Route, status: int | None, api_error: DiscordApiError | None) -> None:
    """Loga erro remoto sem expor token nem payload."""
    logger.warning(
        "Erro da API Discord",
        extra={
            "method": route.method,
            "route": route.key,
            "status_code": status,
            "error_code": api_error.code if api_error else None,
            "error_message": api_error.message if api_error else None,
            "has_field_errors": api_error.has_field_errors if api_error else False,
        },
    )


class DiscordHttpClient(HttpClient):
    """Transporte assíncrono para a API Discord (implementa DispatchTransport).

    Reentrante: uma única instância pode ser usada por várias tasks.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        token: str | None = None,
        base_url: str = "https://discord.com/api/v10",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Inicializa cliente Discord.

        Args:
            config: Configuração HTTP base
            token: Token do bot
            base_url: URL base já com versão
            transport: Transport httpx alternativo (testes)
        """
        super().__init__(config, transport=transport)
        self._token = token
        self.base_url = base_url

    async def request(
        self,
        route: Route,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[int, Any]:
        """Executa a rota e retorna (status, corpo decodificado).

        Raises:
            RemoteError: Em status não-sucesso ou falha de transporte definitivos
                (bulk-replace de comandos nunca é retentado)
        """
        url = route.url(self.base_url)
        kwargs = self._build_request(body, headers)
        try:
            response = await self.send(route.method, url, retry=route.retry, **kwargs)
        except HttpError as exc:
            api_error = _parse_discord_error(exc.body)
            _log_remote_error(route, exc.status_code, api_error)
            raise RemoteError(exc.status_code, exc.body, route) from exc

        return response.status_code, decode_body(response)

    def _build_request(self, body: Any, headers: Mapping[str, str] | None) -> dict[str, Any]:
        """Monta headers e corpo no formato aceito pelo httpx."""
        merged: dict[str, str] = dict(headers or {})
        if self._token:
            merged["Authorization"] = f"Bot {self._token}"

        kwargs: dict[str, Any] = {"headers": merged}
        if isinstance(body, JsonBody | MultipartBody):
            merged["Content-Type"] = body.content_type
            kwargs["content"] = body.render()
        elif body is not None:
            kwargs["json"] = body
        return kwargs


def create_discord_http_client(settings: Settings) -> DiscordHttpClient:
    """Factory para criar cliente Discord configurado.

    Args:
        settings: Configurações da aplicação

    Returns:
        DiscordHttpClient pronto para uso
    """
    config = HttpClientConfig(
        timeout_seconds=float(settings.discord_request_timeout_seconds),
        max_retries=settings.discord_max_retries,
        backoff_base_seconds=float(settings.discord_retry_backoff_seconds),
        default_headers={
            "User-Agent": settings.user_agent,
        },
    )

    logger.info(
        "Cliente Discord HTTP criado",
        extra={
            "timeout": config.timeout_seconds,
            "max_retries": config.max_retries,
            "api_endpoint": settings.api_endpoint,
        },
    )

    return DiscordHttpClient(
        config=config,
        token=settings.discord_bot_token,
        base_url=settings.api_endpoint,
    )
