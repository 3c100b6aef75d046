"""Modelos de mensagem para a API Discord.

Responsabilidade:
- Estruturar a requisição outbound (conteúdo, embeds, menções, resposta, componentes)
- Mapear respostas da API em objetos mínimos (Message, Application)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from guildwire.domain.enums import AllowedMentionType


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class EmbedField(BaseModel):
    """Campo nome/valor de um embed."""

    name: str
    value: str
    inline: bool = False


class Embed(BaseModel):
    """Embed rico anexado à mensagem."""

    title: str | None = None
    description: str | None = None
    url: str | None = None
    color: int | None = None
    timestamp: datetime | None = None
    footer_text: str | None = None
    footer_icon_url: str | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None
    author_name: str | None = None
    author_url: str | None = None
    author_icon_url: str | None = None
    embed_fields: list[EmbedField] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        payload = _compact(
            {
                "title": self.title,
                "description": self.description,
                "url": self.url,
                "color": self.color,
                "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            }
        )
        if self.footer_text:
            payload["footer"] = _compact({"text": self.footer_text, "icon_url": self.footer_icon_url})
        if self.image_url:
            payload["image"] = {"url": self.image_url}
        if self.thumbnail_url:
            payload["thumbnail"] = {"url": self.thumbnail_url}
        if self.author_name:
            payload["author"] = _compact(
                {"name": self.author_name, "url": self.author_url, "icon_url": self.author_icon_url}
            )
        if self.embed_fields:
            payload["fields"] = [item.model_dump() for item in self.embed_fields]
        return payload


class AllowedMentions(BaseModel):
    """Política de menções permitidas.

    Campos None herdam do padrão do cliente em to_payload(default).
    """

    everyone: bool | None = None
    users: bool | list[str] | None = None
    roles: bool | list[str] | None = None
    replied_user: bool | None = None

    def to_payload(self, default: AllowedMentions | None = None) -> dict[str, Any]:
        """Serializa mesclando com o padrão do cliente (campos None herdam)."""
        base = default or AllowedMentions()
        everyone = self.everyone if self.everyone is not None else base.everyone
        users = self.users if self.users is not None else base.users
        roles = self.roles if self.roles is not None else base.roles
        replied_user = self.replied_user if self.replied_user is not None else base.replied_user

        parse: list[str] = []
        payload: dict[str, Any] = {}
        if everyone:
            parse.append(AllowedMentionType.EVERYONE.value)
        if users is True:
            parse.append(AllowedMentionType.USERS.value)
        elif isinstance(users, list):
            payload["users"] = users
        if roles is True:
            parse.append(AllowedMentionType.ROLES.value)
        elif isinstance(roles, list):
            payload["roles"] = roles
        payload["parse"] = parse
        if replied_user is not None:
            payload["replied_user"] = replied_user
        return payload

    @classmethod
    def from_parse(cls, parse: list[str], replied_user: bool | None = None) -> AllowedMentions:
        """Constrói política a partir de uma lista parse (formato de configuração)."""
        kinds = {AllowedMentionType(item) for item in parse}
        return cls(
            everyone=AllowedMentionType.EVERYONE in kinds,
            users=AllowedMentionType.USERS in kinds,
            roles=AllowedMentionType.ROLES in kinds,
            replied_user=replied_user,
        )


class MessageReference(BaseModel):
    """Referência a uma mensagem anterior (reply)."""

    message_id: str
    channel_id: str | None = None
    guild_id: str | None = None
    fail_if_not_exists: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        return _compact(self.model_dump())


class OutboundMessageRequest(BaseModel):
    """Requisição para enviar uma mensagem outbound."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: str | None = None
    tts: bool = False
    embeds: list[Embed] = Field(default_factory=list)
    allowed_mentions: AllowedMentions | None = None
    reference: MessageReference | None = None
    components: list[Any] = Field(default_factory=list)  # lista plana para o layout
    flags: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _single_embed(cls, data: Any) -> Any:
        """Aceita `embed=` (único) como atalho para `embeds=[embed]`."""
        if isinstance(data, dict) and "embed" in data:
            data = dict(data)
            embed = data.pop("embed")
            if embed is not None:
                data["embeds"] = [embed, *data.get("embeds", [])]
        return data


class Message(BaseModel):
    """Mensagem retornada pela API (subconjunto estável dos campos)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    channel_id: str
    guild_id: str | None = None
    content: str = ""
    tts: bool = False
    author_id: str | None = None
    timestamp: datetime | None = None
    embeds: list[dict[str, Any]] = Field(default_factory=list)
    components: list[dict[str, Any]] = Field(default_factory=list)
    attachments: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any], guild_id: str | None = None) -> Message:
        """Converte o corpo decodificado da API em Message."""
        author = data.get("author") or {}
        return cls.model_validate(
            {
                **data,
                "guild_id": data.get("guild_id") or guild_id,
                "author_id": author.get("id"),
            }
        )


class Application(BaseModel):
    """Aplicação dona do bot (apenas o necessário para registrar comandos)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
