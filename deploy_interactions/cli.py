from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, TYPE_CHECKING

from uvloop import run as uvloop_run
import logfire
import typer

from .config import DEFAULT_STORE_FILE, DeployConfig, resolve_config, store_config
from .deploy import deploy
from .errors import DeployException
from .http import DiscordClient
from .loader import group_by_type, load_commands, resolve_destinations
from .report import render_report
from .telemetry import configure_logging
from .version import VERSION

if TYPE_CHECKING:
    from .models import ApplicationCommandConfig
    from .protocols import CommandClient


__all__ = (
    'app',
    'main',
    'run',
)


app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f'deploy-interactions {VERSION}')
        raise typer.Exit()


def _resolve_commands(
    config: DeployConfig,
    deploy_global: bool
) -> list[ApplicationCommandConfig]:
    if config.commands:
        commands, configs = load_commands(
            config.commands,
            config.named_export,
            deploy_global
        )
    else:
        commands, configs = list(config.command_definitions), []

    configs.extend(resolve_destinations(
        commands,
        config.command_destinations,
        deploy_global
    ))

    return configs


async def run(
    config: DeployConfig,
    deploy_global: bool = True,
    client: CommandClient | None = None
) -> int:
    """Deploy everything `config` describes and print the report, returns the exit code"""
    owned_client: DiscordClient | None = None

    try:
        config.validate_for_deploy()
        configs = _resolve_commands(config, deploy_global)

        if client is None:
            assert config.token is not None
            client = owned_client = DiscordClient(config.token, config.client_id)
    except DeployException as e:
        typer.echo(f'Error: {e}', err=True)
        return 1

    try:
        with logfire.span('deploying {count} command configs', count=len(configs)):
            report = await deploy(
                group_by_type(configs),
                client,
                dev_guild_id=config.dev_guild_id if config.developer else None,
                bulk_overwrite=config.bulk_overwrite,
                force=config.force,
                dry_run=config.dry_run
            )
    finally:
        if owned_client is not None:
            await owned_client.close()

    typer.echo(render_report(
        report,
        dry_run=config.dry_run,
        full=config.full,
        summary=config.summary,
        debug=config.debug
    ))

    return 1 if report is not None and report.error is not None else 0


@app.command(help='Deploy discord application commands, only changed commands are sent.')
def deploy_interactions(
    token: Optional[str] = typer.Option(
        None, '--token', '-t', help='bot token, defaults to DISCORD_TOKEN'),
    client_id: Optional[str] = typer.Option(
        None, '--client-id', '-i', help='application id, read from the token when omitted'),
    commands: Optional[List[str]] = typer.Option(
        None, '--commands', '-c', help='file or folder to load commands from, repeatable'),
    developer: bool = typer.Option(
        False, '--developer', '-d', help='deploy every command to the dev guild only'),
    dev_guild_id: Optional[str] = typer.Option(
        None, '--dev-guild-id', help='guild used by --developer, defaults to DISCORD_DEV_GUILD_ID'),
    bulk_overwrite: bool = typer.Option(
        False, '--bulk-overwrite', '-b', help='replace every command of a destination in one call'),
    force: bool = typer.Option(
        False, '--force', '-f', help='create every command, even unchanged ones'),
    no_global: bool = typer.Option(
        False, '--no-global', help='never deploy global commands'),
    named_export: Optional[str] = typer.Option(
        None, '--named-export', '-n', help='attribute or key holding the command in command files'),
    dry_run: bool = typer.Option(
        False, '--dry-run', '-r', help='resolve everything without calling discord'),
    no_summary: bool = typer.Option(
        False, '--no-summary', help='print a single status line instead of the summary table'),
    full: bool = typer.Option(
        False, '--full', help='print every destination in full'),
    store: bool = typer.Option(
        False, '--store', '-s', help='store the resolved config, without the token'),
    store_path: Path = typer.Option(
        Path(DEFAULT_STORE_FILE), '--store-path', help='file written by --store'),
    config_path: Optional[Path] = typer.Option(
        None, '--config', help='config file, searched for in the working directory when omitted'),
    debug: bool = typer.Option(
        False, '--debug', help='verbose logging, implies --full'),
    version: Optional[bool] = typer.Option(
        None, '--version', callback=_version_callback, is_eager=True)
) -> None:
    configure_logging(debug)

    # ? flags only override the stored config when set
    overrides: dict[str, Any] = {
        'token': token,
        'client_id': client_id,
        'commands': commands or None,
        'developer': developer or None,
        'dev_guild_id': dev_guild_id,
        'bulk_overwrite': bulk_overwrite or None,
        'force': force or None,
        'named_export': named_export,
        'dry_run': dry_run or None,
        'summary': False if no_summary else None,
        'full': full or None,
        'debug': debug or None
    }

    try:
        config = resolve_config(overrides, config_path)
    except DeployException as e:
        typer.echo(f'Error: {e}', err=True)
        raise typer.Exit(code=1) from e

    if config.debug and not debug:
        configure_logging(True)

    if store:
        store_config(config, store_path)

    raise typer.Exit(code=uvloop_run(run(config, deploy_global=not no_global)))


def main() -> None:
    app(prog_name='deploy-interactions')
