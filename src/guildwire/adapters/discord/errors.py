"""Erros do adapter Discord.

Taxonomia:
- StreamReadError: local, recuperável pelo chamador (novo stream)
- RemoteError: status não-sucesso devolvido pela API, repassado sem alteração
- ConfigurationError: declaração/configuração que impede a resolução local
- CommandSyncError: falha de um bulk-replace durante a sincronização
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from guildwire.adapters.discord.routes import Route
    from guildwire.application.commands.synchronizer import SyncReport


class GuildwireError(Exception):
    """Erro base do pacote."""


class ValidationError(GuildwireError):
    """Mensagem outbound estruturalmente inválida."""


class ComponentError(GuildwireError):
    """Componente interativo mal construído."""


class CommandValidationError(GuildwireError):
    """Declaração de comando viola as restrições da própria operação."""


class RegistryLockedError(GuildwireError):
    """Registro fechado: há uma sincronização em andamento."""


class ConfigurationError(GuildwireError):
    """Configuração insuficiente para resolver a operação localmente."""


class StreamReadError(GuildwireError):
    """Falha ao ler o conteúdo de um anexo."""

    def __init__(self, attachment_index: int, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Falha ao ler anexo #{attachment_index}{detail}")
        self.attachment_index = attachment_index


class RemoteError(GuildwireError):
    """Resposta não-sucesso da API remota."""

    def __init__(self, status: int | None, decoded_body: Any, route: Route | None = None) -> None:
        where = f" em {route.method} {route.path}" if route else ""
        super().__init__(f"HTTP {status}{where}")
        self.status = status
        self.decoded_body = decoded_body
        self.route = route

    @property
    def code(self) -> int | None:
        """Código de erro JSON da API (ex.: 50001 Missing Access), se houver."""
        if isinstance(self.decoded_body, dict):
            code = self.decoded_body.get("code")
            return code if isinstance(code, int) else None
        return None


class CommandSyncError(GuildwireError):
    """Sincronização abortada por falha remota em uma partição."""

    def __init__(
        self,
        failed_partition: str,
        remote_error: RemoteError,
        report: SyncReport,
    ) -> None:
        super().__init__(
            f"Falha ao sincronizar partição {failed_partition}: {remote_error} "
            f"(não tentadas: {list(report.not_attempted)})"
        )
        self.failed_partition = failed_partition
        self.remote_error = remote_error
        self.report = report

    @property
    def not_attempted(self) -> tuple[str, ...]:
        return self.report.not_attempted
