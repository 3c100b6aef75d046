"""Re-exports dos Protocolos de domínio para uso por Application."""

from __future__ import annotations

from guildwire.domain.protocols.transport import DispatchTransport

__all__ = [
    "DispatchTransport",
]
