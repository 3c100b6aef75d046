"""Porta de transporte para chamadas à API remota."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from guildwire.adapters.discord.routes import Route


class DispatchTransport(Protocol):
    """Contrato do transporte assíncrono.

    Implementações devem:
    - Ser reentrantes (várias tasks podem chamar request concorrentemente)
    - Retornar (status, corpo decodificado) em sucesso
    - Levantar RemoteError(status, decoded_body) em status não-sucesso
    - Nunca logar o token de autenticação
    """

    async def request(
        self,
        route: Route,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[int, Any]:
        """Executa a chamada e retorna (status, corpo decodificado)."""
        ...
