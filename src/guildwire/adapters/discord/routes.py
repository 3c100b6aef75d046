"""Rotas da API Discord usadas pelo cliente."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Route:
    """Rota HTTP.

    path: caminho concreto (com ids)
    key: caminho com placeholders, estável para logs e agrupamento
    retry: False para chamadas cuja falha deve chegar ao chamador na primeira tentativa
    """

    method: str
    path: str
    key: str
    retry: bool = True

    def url(self, base: str) -> str:
        return f"{base.rstrip('/')}{self.path}"


def global_commands(application_id: str) -> Route:
    return Route(
        "PUT",
        f"/applications/{application_id}/commands",
        "/applications/:application_id/commands",
        retry=False,
    )


def guild_commands(application_id: str, guild_id: str) -> Route:
    return Route(
        "PUT",
        f"/applications/{application_id}/guilds/{guild_id}/commands",
        "/applications/:application_id/guilds/:guild_id/commands",
        retry=False,
    )


def current_application() -> Route:
    return Route("GET", "/oauth2/applications/@me", "/oauth2/applications/@me")


def channel_messages(channel_id: str, method: str = "POST", query: str = "") -> Route:
    suffix = f"?{query}" if query else ""
    return Route(
        method,
        f"/channels/{channel_id}/messages{suffix}",
        "/channels/:channel_id/messages",
    )


def channel_message(channel_id: str, message_id: str) -> Route:
    return Route(
        "GET",
        f"/channels/{channel_id}/messages/{message_id}",
        "/channels/:channel_id/messages/:message_id",
    )


def channel(channel_id: str, method: str = "DELETE") -> Route:
    return Route(method, f"/channels/{channel_id}", "/channels/:channel_id")
