#!/usr/bin/env python
"""Registra os comandos de aplicação declarados em um módulo.

Carrega um CommandRegistry de MODULE[:ATTR] (ATTR padrão: registry),
sincroniza com a API e lista os comandos registrados por partição.

Uso:
    python scripts/setup_commands.py mybot.commands
    python scripts/setup_commands.py mybot.commands:registry --guild 123 --guild 456
    python scripts/setup_commands.py mybot.commands --global

Configuração via env vars: DISCORD_BOT_TOKEN, DISCORD_APPLICATION_ID (opcional).
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import sys

from guildwire.adapters.discord.errors import CommandSyncError, ConfigurationError
from guildwire.adapters.discord.http_client import create_discord_http_client
from guildwire.application.commands import (
    CommandRegistry,
    CommandSynchronizer,
    DefaultScopeConfig,
    SyncPlan,
    SyncReport,
    build_sync_plan,
)
from guildwire.config.settings import Settings, get_settings
from guildwire.observability.logging import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sincroniza comandos de aplicação com a API Discord",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "target",
        help="Módulo com o registro, no formato MODULE[:ATTR]",
    )
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        "--guild",
        action="append",
        default=[],
        metavar="ID",
        help="Guild de destino dos comandos sem escopo (repetível)",
    )
    scope.add_argument(
        "--global",
        dest="as_global",
        action="store_true",
        help="Registra comandos sem escopo como globais",
    )
    return parser.parse_args(argv)


def load_registry(target: str) -> CommandRegistry:
    """Importa MODULE e retorna o atributo ATTR (padrão: registry)."""
    module_name, _, attr = target.partition(":")
    module = importlib.import_module(module_name)
    registry = getattr(module, attr or "registry")
    if not isinstance(registry, CommandRegistry):
        raise TypeError(f"{target} não é um CommandRegistry ({type(registry).__name__})")
    return registry


def resolve_default_scope(args: argparse.Namespace, settings: Settings) -> DefaultScopeConfig | None:
    if args.guild:
        return DefaultScopeConfig.scoped(*args.guild)
    if args.as_global:
        return DefaultScopeConfig.global_()
    return DefaultScopeConfig.from_settings(settings)


def _print_partition(partition: str, names: list[str]) -> None:
    print(f"Registered commands for {partition}:")
    for name in names:
        print(f"  - {name}")


def print_partitions(plan: SyncPlan, report: SyncReport) -> None:
    """Lista apenas as partições confirmadas no relatório (parcial em caso de falha)."""
    if report.global_count:
        _print_partition("global", [command.name for command in plan.global_commands])
    for guild_id in report.completed_scopes:
        _print_partition(guild_id, [command.name for command in plan.scoped_commands[guild_id]])


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.service_name, fmt=settings.log_format)
    registry = load_registry(args.target)
    default_scope = resolve_default_scope(args, settings)

    client = create_discord_http_client(settings)
    synchronizer = CommandSynchronizer(registry, client, settings=settings)
    try:
        report = await synchronizer.synchronize(default_scope)
    except ConfigurationError as exc:
        print(f"Configuração inválida: {exc}", file=sys.stderr)
        return 2
    except CommandSyncError as exc:
        print_partitions(build_sync_plan(registry.commands, default_scope), exc.report)
        print(f"Falha na partição {exc.failed_partition}: {exc.remote_error}", file=sys.stderr)
        if exc.not_attempted:
            print(f"Não tentadas: {', '.join(exc.not_attempted)}", file=sys.stderr)
        return 1
    finally:
        await client.close()

    print_partitions(build_sync_plan(registry.commands, default_scope), report)
    return 0


def main() -> None:
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
