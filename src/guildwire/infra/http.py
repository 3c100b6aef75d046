"""Cliente HTTP centralizado com retry, timeout e logging.

Este módulo fornece um cliente HTTP configurável para chamadas
externas (API Discord), com:
- Retry com backoff exponencial conforme o tipo de falha e o método
- Timeouts configuráveis
- Logging estruturado (sem token e sem conteúdo de mensagens)
- Injeção de headers padrão

Política de retry:
- 429 e falha de conexão: requisição não processada, retry em qualquer método
- 5xx e timeout: só métodos idempotentes (o servidor pode ter aplicado a escrita)
- retry=False desliga o retry da chamada (primeira falha já é definitiva)
- 4xx (exceto 429) nunca é retentado
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import httpx

from guildwire.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

# Webhooks carregam o token no próprio path: /webhooks/{id}/{token}
_WEBHOOK_TOKEN_PATTERN = re.compile(r"(/webhooks/\d+/)[^/?]+")


def _sanitize_url(url: str) -> str:
    """Remove tokens de webhook da URL para logging seguro."""
    if "/webhooks/" in url:
        return _WEBHOOK_TOKEN_PATTERN.sub(r"\1***", url)
    return url


class FailureKind(StrEnum):
    """Falhas transitórias reconhecidas pelo cliente."""

    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    CONNECT = "connect"


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    Valores padrão são seguros e conservadores.
    """

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 2.0
    backoff_max_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem expor informações sensíveis.

    failure é None para status definitivos (4xx) e para erros inesperados.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        failure: FailureKind | None = None,
        body: Any = None,
        attempts: int = 1,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.failure = failure
        self.body = body
        self.attempts = attempts

    @property
    def is_retryable(self) -> bool:
        return self.failure is not None


def classify_status(status_code: int) -> FailureKind | None:
    """Tipo de falha transitória do status, ou None se definitivo."""
    if status_code == 429:
        return FailureKind.RATE_LIMITED
    if 500 <= status_code < 600:
        return FailureKind.SERVER_ERROR
    return None


def may_retry(method: str, failure: FailureKind | None) -> bool:
    """Indica se a falha permite reenviar a requisição com este método."""
    if failure is None:
        return False
    if failure in (FailureKind.RATE_LIMITED, FailureKind.CONNECT):
        return True
    return method.upper() in IDEMPOTENT_METHODS


def _calculate_backoff(
    attempt: int,
    base_seconds: float,
    max_seconds: float,
) -> float:
    """Calcula tempo de espera com backoff exponencial."""
    return min((2**attempt) * base_seconds, max_seconds)


def decode_body(response: httpx.Response) -> Any:
    """Decodifica o corpo da resposta (JSON quando possível, texto caso contrário)."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def _failure_from_exception(exc: Exception) -> FailureKind | None:
    # ConnectTimeout herda de TimeoutException: tratado como timeout
    if isinstance(exc, httpx.TimeoutException):
        return FailureKind.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return FailureKind.CONNECT
    return None


def _log_attempt(method: str, url: str, attempt: int, allowed: int) -> None:
    logger.debug(
        "Executando requisição HTTP",
        extra={
            "method": method,
            "url": _sanitize_url(url),
            "attempt": attempt,
            "max_attempts": allowed,
        },
    )


def _log_failure(method: str, url: str, error: HttpError, will_retry: bool) -> None:
    """Loga falha sem payload: warning se vai retentar, error se definitiva."""
    logger.log(
        logging.WARNING if will_retry else logging.ERROR,
        "Requisição HTTP falhou",
        extra={
            "method": method,
            "url": _sanitize_url(url),
            "status_code": error.status_code,
            "failure": error.failure.value if error.failure else None,
            "attempt": error.attempts,
            "will_retry": will_retry,
        },
    )


class HttpClient:
    """Cliente HTTP assíncrono com retry e logging.

    Uso típico:
        async with HttpClient(config) as client:
            response = await client.send("PUT", url, json=payload, retry=False)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Inicializa cliente com configuração.

        Args:
            config: Configuração de timeout/retry/headers
            transport: Transport httpx alternativo (testes usam MockTransport)
        """
        self._config = config or HttpClientConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Retorna cliente httpx (lazy loading)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                headers=self._config.default_headers,
                verify=self._config.verify_ssl,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Fecha o cliente e libera recursos."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def send(
        self,
        method: str,
        url: str,
        *,
        retry: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Executa a requisição, retentando conforme a política do módulo.

        Args:
            method: Método HTTP (GET, POST, PUT, ...)
            url: URL da requisição
            retry: False envia uma única vez
            **kwargs: Argumentos passados para httpx

        Returns:
            Resposta com status de sucesso

        Raises:
            HttpError: Status não-sucesso ou falha de transporte definitivos
        """
        client = await self._get_client()
        allowed = self._config.max_retries + 1 if retry else 1

        attempt = 0
        while True:
            attempt += 1
            _log_attempt(method, url, attempt, allowed)
            try:
                response = await client.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                error = HttpError(
                    type(exc).__name__,
                    failure=_failure_from_exception(exc),
                    attempts=attempt,
                )
                cause: Exception | None = exc
            except Exception as exc:
                logger.error(
                    "Erro inesperado em requisição HTTP",
                    extra={"method": method, "url": _sanitize_url(url), "error_type": type(exc).__name__},
                )
                raise HttpError(f"Erro inesperado: {type(exc).__name__}", attempts=attempt) from exc
            else:
                if response.is_success:
                    return response
                error = HttpError(
                    f"HTTP {response.status_code}",
                    status_code=response.status_code,
                    failure=classify_status(response.status_code),
                    body=decode_body(response),
                    attempts=attempt,
                )
                cause = None

            will_retry = attempt < allowed and may_retry(method, error.failure)
            _log_failure(method, url, error, will_retry)
            if not will_retry:
                raise error from cause
            await self._wait_backoff(attempt)

    async def _wait_backoff(self, attempt: int) -> None:
        cfg = self._config
        backoff = _calculate_backoff(attempt - 1, cfg.backoff_base_seconds, cfg.backoff_max_seconds)
        logger.info(
            "Aguardando backoff antes de retry",
            extra={"backoff_seconds": backoff, "next_attempt": attempt + 1},
        )
        await asyncio.sleep(backoff)
