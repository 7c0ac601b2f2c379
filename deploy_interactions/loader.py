"""Loading command definitions from json files and python modules."""

from __future__ import annotations

from importlib.util import module_from_spec, spec_from_file_location
from typing import Any, TYPE_CHECKING
from pathlib import Path

from pydantic import ValidationError
from orjson import JSONDecodeError, loads
import logfire

from .errors import CommandLoadError
from .models import (
    ApplicationCommand,
    ApplicationCommandConfig,
    ApplicationCommandType,
    DestinationCommand,
    PathDestinations
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from .types import Snowflake


__all__ = (
    'COMMAND_SUFFIXES',
    'CommandPath',
    'get_command',
    'get_folder_commands',
    'group_by_type',
    'load_commands',
    'resolve_destinations',
)


COMMAND_SUFFIXES = frozenset({'.json', '.py'})
DEFAULT_EXPORT = 'command'

type CommandPath = str | Path | Mapping[str, Any]


def _import_module(path: Path) -> Any:  # noqa: ANN401
    spec = spec_from_file_location(f'_deploy_interactions_{path.stem}', path)

    if spec is None or spec.loader is None:
        raise CommandLoadError(f'unable to import {path}')

    module = module_from_spec(spec)
    spec.loader.exec_module(module)

    return module


def _read_payload(
    path: Path,
    named_export: str | None
) -> Any:  # noqa: ANN401
    match path.suffix:
        case '.json':
            try:
                data = loads(path.read_bytes())
            except (OSError, JSONDecodeError) as e:
                raise CommandLoadError(f'unable to read {path}: {e}') from e

            if named_export is not None and isinstance(data, dict):
                data = data.get(named_export)
        case '.py':
            try:
                module = _import_module(path)
            except CommandLoadError:
                raise
            except Exception as e:
                raise CommandLoadError(f'unable to import {path}: {e}') from e

            data = getattr(module, named_export or DEFAULT_EXPORT, None)
        case _:
            raise CommandLoadError(f'unexpected file ending for {path}')

    if isinstance(data, ApplicationCommand):
        return data

    for method in ('as_payload', 'to_dict'):
        if callable(serialize := getattr(data, method, None)):
            return serialize()

    return data


def get_command(
    path: str | Path,
    named_export: str | None = None
) -> ApplicationCommand:
    path = Path(path)
    data = _read_payload(path, named_export)

    if isinstance(data, ApplicationCommand):
        return data

    if (
        not isinstance(data, dict) or
        'name' not in data or
        ('description' not in data and 'type' not in data)
    ):
        raise CommandLoadError(f'read command file {path} but its export is not a command')

    # ? exported dicts belong to the command module, never modify them
    data = {'type': ApplicationCommandType.CHAT_INPUT.value, **data}

    try:
        return ApplicationCommand.model_validate(data)
    except ValidationError as e:
        raise CommandLoadError(f'invalid command in {path}: {e}') from e


def get_folder_commands(
    path: str | Path,
    named_export: str | None = None
) -> list[ApplicationCommand]:
    """Every command in a folder, files that fail to load are logged and skipped"""
    commands = []

    for file in sorted(Path(path).iterdir()):
        if file.suffix not in COMMAND_SUFFIXES or file.name.startswith('_'):
            continue

        try:
            commands.append(get_command(file, named_export))
        except CommandLoadError as e:
            logfire.debug('skipping {file}: {error}', file=str(file), error=str(e))

    return commands


def _commands_at(
    path: Path,
    named_export: str | None
) -> list[ApplicationCommand]:
    if path.is_dir():
        return get_folder_commands(path, named_export)

    if not path.exists():
        raise CommandLoadError(f'the file or folder {path} does not exist')

    return [get_command(path, named_export)]


def load_commands(
    paths: Sequence[CommandPath],
    named_export: str | None = None,
    deploy_global: bool = True
) -> tuple[list[ApplicationCommand], list[ApplicationCommandConfig]]:
    """Load every command found under `paths`.

    Plain paths produce bare definitions, destinations are applied to them
    later. Paths given as `{path, destinations}` produce ready configs,
    the global flag is dropped when `deploy_global` is off.
    """
    commands: list[ApplicationCommand] = []
    configs: list[ApplicationCommandConfig] = []

    for entry in paths:
        if isinstance(entry, str | Path):
            commands.extend(_commands_at(Path(entry), named_export))
            continue

        if 'path' not in entry:
            raise CommandLoadError('command path entries need a `path` key')

        try:
            destinations = PathDestinations.model_validate(
                entry.get('destinations', {})
            )
        except ValidationError as e:
            raise CommandLoadError(f'invalid destinations for {entry['path']}: {e}') from e

        configs.extend(
            ApplicationCommandConfig(
                command=command,
                global_=destinations.global_ and deploy_global,
                guild_ids=destinations.guild_ids
            )
            for command in _commands_at(Path(entry['path']), named_export)
        )

    logfire.debug(
        'loaded {count} commands from {paths} paths',
        count=len(commands) + len(configs),
        paths=len(paths)
    )

    return commands, configs


def resolve_destinations(
    commands: Iterable[ApplicationCommand],
    destinations: Mapping[str, Sequence[DestinationCommand]] | None,
    deploy_global: bool = True
) -> list[ApplicationCommandConfig]:
    """Bind bare commands to the destinations of a `global` / guild id table.

    Without a table every command is deployed globally (when allowed).
    """
    configs = []

    for command in commands:
        if destinations is None:
            configs.append(ApplicationCommandConfig(
                command=command,
                global_=deploy_global
            ))
            continue

        global_ = False
        guild_ids: list[Snowflake] = []

        for destination, entries in destinations.items():
            if not any(entry.matches(command) for entry in entries):
                continue

            if destination == 'global':
                global_ = deploy_global
                continue

            guild_ids.append(destination)

        configs.append(ApplicationCommandConfig(
            command=command,
            global_=global_,
            guild_ids=guild_ids
        ))

    return configs


def group_by_type(
    configs: Iterable[ApplicationCommandConfig]
) -> dict[ApplicationCommandType, list[ApplicationCommandConfig]]:
    grouped: dict[ApplicationCommandType, list[ApplicationCommandConfig]] = {
        ApplicationCommandType.CHAT_INPUT: [],
        ApplicationCommandType.USER: [],
        ApplicationCommandType.MESSAGE: []
    }

    for config in configs:
        grouped.setdefault(config.command.effective_type, []).append(config)

    return grouped
