"""Builders de payload para a API Discord.

Cada builder cuida de uma parte da mensagem (base, embeds, menções,
componentes); a factory compõe o documento JSON final.
"""

from guildwire.adapters.discord.payload_builders.base import (
    PayloadBuilder,
    build_base_payload,
)
from guildwire.adapters.discord.payload_builders.factory import (
    build_full_payload,
)

__all__ = [
    "PayloadBuilder",
    "build_base_payload",
    "build_full_payload",
]
