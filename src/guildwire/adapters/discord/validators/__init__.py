"""Validadores locais para mensagens e comandos Discord.

Uso:
    from guildwire.adapters.discord.validators import (
        validate_outbound_message,
        validate_option,
    )
"""

from guildwire.adapters.discord.validators.command import (
    validate_children,
    validate_description,
    validate_name,
    validate_option,
    validate_options,
)
from guildwire.adapters.discord.validators.message import (
    validate_history_query,
    validate_outbound_message,
)

__all__ = [
    "validate_children",
    "validate_description",
    "validate_history_query",
    "validate_name",
    "validate_option",
    "validate_options",
    "validate_outbound_message",
]
