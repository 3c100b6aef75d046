"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars (ou .env em development).
Nunca hardcode o token do bot ou valores sensíveis.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from guildwire.observability.logging import get_logger

# -----------------------------------------------------------------------------
# Constantes da API Discord
# Referência: https://discord.com/developers/docs/reference#api-versioning
# -----------------------------------------------------------------------------
DISCORD_API_VERSION: str = "v10"
DISCORD_API_BASE_URL: str = "https://discord.com/api"
DEFAULT_USER_AGENT_URL: str = "https://pypi.org/project/guildwire/"


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
    )

    # Aplicação
    service_name: str = "guildwire"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # Discord API
    discord_bot_token: str | None = None  # Token do bot (nunca logar)
    discord_application_id: str | None = None  # Se ausente, buscado via /oauth2/applications/@me
    discord_api_base_url: str = DISCORD_API_BASE_URL
    discord_api_version: str = DISCORD_API_VERSION
    discord_user_agent_url: str = DEFAULT_USER_AGENT_URL  # URL identificando o cliente no User-Agent

    @property
    def api_endpoint(self) -> str:
        """Retorna a URL base completa da API (base + versão)."""
        return f"{self.discord_api_base_url}/{self.discord_api_version}"

    @property
    def user_agent(self) -> str:
        """User-Agent no formato exigido pela API: DiscordBot (url, versão)."""
        return f"DiscordBot ({self.discord_user_agent_url}, {self.version})"

    # Envio (HTTP)
    discord_request_timeout_seconds: int = 30  # Timeout HTTP
    discord_max_retries: int = 3  # Retries em 429/conexão; 5xx/timeouts só em métodos idempotentes
    discord_retry_backoff_seconds: int = 2  # Base do backoff exponencial

    # Comandos de aplicação
    command_default_guild_ids: list[str] | None = None  # Escopo padrão p/ comandos sem escopo
    command_default_global: bool = True  # Sem guild ids: promove comandos padrão a globais

    # Menções permitidas (padrão do cliente)
    allowed_mentions_parse: list[str] = ["users", "roles"]
    allowed_mentions_replied_user: bool = True

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment.lower() in ("staging", "stage")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")

    def validate_discord_config(self) -> list[str]:
        """Valida se configurações mínimas do Discord estão presentes.

        Retorna lista de erros (vazia = tudo OK).
        """
        errors: list[str] = []
        if not self.discord_bot_token:
            errors.append("DISCORD_BOT_TOKEN não configurado")
        if self.discord_application_id and not self.discord_application_id.isdigit():
            errors.append("DISCORD_APPLICATION_ID deve ser um snowflake numérico")
        if not self.discord_api_base_url.startswith("https://") and not self.is_development:
            errors.append("DISCORD_API_BASE_URL deve usar https fora de development")
        return errors

    def validate_command_defaults(self) -> list[str]:
        """Valida configuração do escopo padrão de comandos."""
        errors: list[str] = []
        for guild_id in self.command_default_guild_ids or []:
            if not str(guild_id).isdigit():
                errors.append(f"COMMAND_DEFAULT_GUILD_IDS contém id inválido: {guild_id}")
        return errors

    def model_post_init(self, __context: Any) -> None:
        """Falha explicitamente (fail-closed) em staging/produção sem token."""
        logger: logging.Logger = get_logger(__name__)

        if self.is_development:
            logger.info(
                "Usando configuração de development (token via env vars)",
                extra={"environment": self.environment},
            )
            return

        errors = self.validate_discord_config() + self.validate_command_defaults()
        if errors and (self.is_staging or self.is_production):
            logger.error(
                "Validação de configuração Discord falhou",
                extra={"errors": errors, "environment": self.environment},
            )
            raise RuntimeError(f"Configuração Discord inválida: {'; '.join(errors)}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings."""
    return Settings()
