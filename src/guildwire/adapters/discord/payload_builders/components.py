"""Builder para componentes interativos (action rows)."""

from __future__ import annotations

from typing import Any

from guildwire.adapters.discord.layout import build_rows, rows_to_components
from guildwire.adapters.discord.models import AllowedMentions, OutboundMessageRequest


class ComponentsPayloadBuilder:
    """Agrupa a lista plana de componentes em linhas e serializa."""

    def build(
        self,
        request: OutboundMessageRequest,
        default_allowed_mentions: AllowedMentions | None = None,
    ) -> dict[str, Any]:
        if not request.components:
            return {}
        return {"components": rows_to_components(build_rows(request.components))}
