"""Configurações centralizadas do guildwire.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única
- Constantes da API Discord (DISCORD_API_VERSION, etc.)

Uso típico:
    from guildwire.config import get_settings, DISCORD_API_VERSION
"""

from guildwire.config.settings import (
    DISCORD_API_BASE_URL,
    DISCORD_API_VERSION,
    DEFAULT_USER_AGENT_URL,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "DISCORD_API_VERSION",
    "DISCORD_API_BASE_URL",
    "DEFAULT_USER_AGENT_URL",
]
