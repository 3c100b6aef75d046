"""Testes para scripts/setup_commands.py."""

from __future__ import annotations

import sys
import types
from unittest.mock import AsyncMock, patch

import pytest

from guildwire.adapters.discord.errors import RemoteError
from guildwire.application.commands import CommandRegistry, DefaultScopeConfig
from guildwire.config.settings import Settings
from guildwire.domain.commands import GLOBAL
from scripts import setup_commands


@pytest.fixture()
def declared_module():
    registry = CommandRegistry()
    registry.register_slash("ping", "Responde pong", scope=GLOBAL)
    registry.register_slash("ban", "Bane", scope=["42"])
    registry.register_context_menu("Denunciar", "message")
    module = types.ModuleType("fake_bot_commands")
    module.registry = registry
    module.other = object()
    with patch.dict(sys.modules, {"fake_bot_commands": module}):
        yield module


class TestParseArgs:
    def test_guilds_repeatable(self) -> None:
        args = setup_commands.parse_args(["bot.commands", "--guild", "1", "--guild", "2"])

        assert args.target == "bot.commands"
        assert args.guild == ["1", "2"]
        assert args.as_global is False

    def test_global_and_guild_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            setup_commands.parse_args(["bot.commands", "--global", "--guild", "1"])


class TestLoadRegistry:
    def test_default_attribute(self, declared_module) -> None:
        assert setup_commands.load_registry("fake_bot_commands") is declared_module.registry

    def test_wrong_attribute_type(self, declared_module) -> None:
        with pytest.raises(TypeError):
            setup_commands.load_registry("fake_bot_commands:other")


class TestResolveDefaultScope:
    def test_guild_flag(self) -> None:
        args = setup_commands.parse_args(["m", "--guild", "7"])

        assert setup_commands.resolve_default_scope(args, Settings()) == DefaultScopeConfig.scoped("7")

    def test_falls_back_to_settings(self) -> None:
        args = setup_commands.parse_args(["m"])
        settings = Settings(command_default_global=False)

        assert setup_commands.resolve_default_scope(args, settings) is None


class TestRun:
    @pytest.mark.asyncio
    async def test_success_lists_partitions(self, declared_module, capsys) -> None:
        client = AsyncMock()
        client.request.return_value = (200, [])
        settings = Settings(discord_application_id="1000", log_format="text")

        with (
            patch.object(setup_commands, "get_settings", return_value=settings),
            patch.object(setup_commands, "configure_logging"),
            patch.object(setup_commands, "create_discord_http_client", return_value=client),
        ):
            code = await setup_commands.run(setup_commands.parse_args(["fake_bot_commands", "--guild", "9"]))

        out = capsys.readouterr().out
        assert code == 0
        assert "Registered commands for global:\n  - ping" in out
        assert "Registered commands for 42:\n  - ban" in out
        assert "Registered commands for 9:\n  - Denunciar" in out
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_remote_failure_returns_1(self, declared_module, capsys) -> None:
        client = AsyncMock()
        client.request.side_effect = RemoteError(403, {"code": 50001}, None)
        settings = Settings(discord_application_id="1000")

        with (
            patch.object(setup_commands, "get_settings", return_value=settings),
            patch.object(setup_commands, "configure_logging"),
            patch.object(setup_commands, "create_discord_http_client", return_value=client),
        ):
            code = await setup_commands.run(setup_commands.parse_args(["fake_bot_commands", "--global"]))

        assert code == 1
        assert "Falha na partição global" in capsys.readouterr().err
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_still_lists_committed_partitions(self, declared_module, capsys) -> None:
        client = AsyncMock()
        client.request.side_effect = [(200, []), RemoteError(500, None, None)]
        settings = Settings(discord_application_id="1000")

        with (
            patch.object(setup_commands, "get_settings", return_value=settings),
            patch.object(setup_commands, "configure_logging"),
            patch.object(setup_commands, "create_discord_http_client", return_value=client),
        ):
            code = await setup_commands.run(setup_commands.parse_args(["fake_bot_commands", "--guild", "9"]))

        captured = capsys.readouterr()
        assert code == 1
        assert "Registered commands for global:\n  - ping" in captured.out
        assert "Registered commands for 42" not in captured.out
        assert "Falha na partição 42" in captured.err
        assert "Não tentadas: 9" in captured.err
