from __future__ import annotations

from typing import Any, TYPE_CHECKING
from pathlib import Path
from os import environ
from tomllib import TOMLDecodeError, loads as toml_loads

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from orjson import JSONDecodeError, OPT_INDENT_2, dumps, loads
import logfire

from .errors import ConfigError
from .models import ApplicationCommand, DestinationCommand
from .types import Snowflake

if TYPE_CHECKING:
    from collections.abc import Mapping


__all__ = (
    'CONFIG_FILES',
    'DEFAULT_STORE_FILE',
    'DeployConfig',
    'read_config_file',
    'resolve_config',
    'store_config',
)


CONFIG_FILES = (
    'interactions.toml',
    '.interactionsrc.json',
    'pyproject.toml'
)
DEFAULT_STORE_FILE = '.interactionsrc.json'
PYPROJECT_TABLE = 'deploy-interactions'

ENV_KEYS = {
    'DISCORD_TOKEN': 'token',
    'DISCORD_CLIENT_ID': 'client_id',
    'DISCORD_DEV_GUILD_ID': 'dev_guild_id'
}


class DeployConfig(BaseModel):
    # ? camelCase keys keep configs written for the node cli working
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore'
    )

    token: str | None = Field(None, repr=False)
    """The bot token used to deploy, never stored"""
    client_id: Snowflake | None = None
    """The application to deploy to, read from the token when omitted"""
    commands: list[str | dict[str, Any]] = Field(default_factory=list)
    """Files or folders to load commands from, optionally with their destinations"""
    command_definitions: list[ApplicationCommand] = Field(default_factory=list)
    """Raw definitions, ignored when `commands` is set"""
    command_destinations: dict[str, list[DestinationCommand]] | None = None
    """`global` or a guild id, mapped to the commands deployed there"""
    developer: bool = False
    """Deploy every command to `dev_guild_id`, ignoring destinations"""
    dev_guild_id: Snowflake | None = None
    bulk_overwrite: bool = False
    """Replace every command of a destination in one call, skips equality checks"""
    force: bool = False
    """Skip equality checks and create every command"""
    dry_run: bool = False
    """Load and resolve everything without calling discord"""
    debug: bool = False
    full: bool = False
    """Render every destination in full after deploying"""
    summary: bool = True
    named_export: str | None = None
    """The attribute / key holding the command in command files"""

    def validate_for_deploy(self) -> None:
        if not self.token:
            raise ConfigError(
                'no bot token provided, use --token or set DISCORD_TOKEN')

        if self.developer and self.dev_guild_id is None:
            raise ConfigError(
                'developer mode needs a guild id, use --developer <guild id> or set DISCORD_DEV_GUILD_ID')

        if not self.commands and not self.command_definitions:
            raise ConfigError(
                'no commands configured, use --commands or add them to the config file')


def read_config_file(path: Path) -> dict[str, Any] | None:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigError(f'unable to read config file {path}: {e}') from e

    try:
        match path.suffix:
            case '.toml':
                data = toml_loads(raw.decode())

                if path.name == 'pyproject.toml':
                    return data.get('tool', {}).get(PYPROJECT_TABLE)
            case '.json':
                data = loads(raw)
            case _:
                raise ConfigError(
                    f'config file {path} is not a supported file type (toml, json)')
    except (TOMLDecodeError, JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f'unable to parse config file {path}: {e}') from e

    if not isinstance(data, dict):
        raise ConfigError(f'config file {path} does not contain a table')

    return data


def _find_stored_config(
    config_path: str | Path | None,
    cwd: Path
) -> dict[str, Any]:
    if config_path is not None:
        path = cwd / config_path

        if not path.is_file():
            raise ConfigError(f'config file {path} could not be located')

        return read_config_file(path) or {}

    for name in CONFIG_FILES:
        path = cwd / name

        if not path.is_file():
            continue

        if (data := read_config_file(path)) is not None:
            logfire.debug('using stored config {path}', path=str(path))
            return data

    return {}


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None
) -> DeployConfig:
    """Merge defaults, the stored config, the environment and cli overrides, in that order"""
    env = environ if env is None else env
    cwd = Path.cwd() if cwd is None else cwd

    stored = _find_stored_config(config_path, cwd)

    try:
        config = DeployConfig.model_validate(stored)
    except ValidationError as e:
        raise ConfigError(f'invalid stored config: {e}') from e

    updates: dict[str, Any] = {
        field: env[key]
        for key, field in ENV_KEYS.items()
        if env.get(key)
    }

    updates.update({
        key: value
        for key, value in (overrides or {}).items()
        if value is not None
    })

    try:
        overridden = DeployConfig.model_validate(updates)
    except ValidationError as e:
        raise ConfigError(f'invalid config: {e}') from e

    return config.model_copy(update={
        field: getattr(overridden, field)
        for field in overridden.model_fields_set
    })


def store_config(
    config: DeployConfig,
    path: str | Path = DEFAULT_STORE_FILE
) -> None:
    data = config.model_dump(
        mode='json',
        by_alias=True,
        exclude={'token', 'command_definitions', 'command_destinations'},
        exclude_none=True
    )

    if config.command_definitions:
        data['commandDefinitions'] = [
            command.as_payload()
            for command in config.command_definitions
        ]

    if config.command_destinations is not None:
        data['commandDestinations'] = {
            destination: [entry.as_payload() for entry in entries]
            for destination, entries in config.command_destinations.items()
        }

    Path(path).write_bytes(dumps(data, option=OPT_INDENT_2))
    logfire.info('stored config to {path}', path=str(path))
