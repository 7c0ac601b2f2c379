from __future__ import annotations

from typing import TYPE_CHECKING

import logfire

from .errors import ErrorSeverity, HTTPException, classify_error
from .equality import command_diff, command_equals
from .models import (
    GLOBAL,
    ApplicationCommandType,
    DeployResponse,
    DeployTarget,
    ErroredCommand,
    SingleDeployResponse,
    SkippedCommand
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .models import (
        ApplicationCommand,
        ApplicationCommandConfig,
        RemoteApplicationCommand
    )
    from .protocols import CommandClient
    from .types import Snowflake


__all__ = (
    'deploy',
    'deploy_single_destination',
    'separate_destinations',
)


def separate_destinations(
    configs: Sequence[ApplicationCommandConfig]
) -> tuple[list[ApplicationCommand], dict[Snowflake, list[ApplicationCommand]]]:
    global_commands: list[ApplicationCommand] = []
    guild_commands: dict[Snowflake, list[ApplicationCommand]] = {}

    for config in configs:
        if config.global_:
            global_commands.append(config.command)

        for guild_id in config.guild_ids:
            guild_commands.setdefault(guild_id, []).append(config.command)

    return global_commands, guild_commands


async def deploy_single_destination(
    client: CommandClient,
    commands: Sequence[ApplicationCommand],
    force: bool = False,
    bulk: bool = False,
    dry_run: bool = False,
    target: DeployTarget = GLOBAL
) -> SingleDeployResponse:
    """Deploy commands to one destination.

    Failures of the bulk overwrite or of fetching the registered commands
    become the response's `bulk_error`. Any call failing with a status in
    `FATAL_STATUS_CODES` is raised instead, nothing else is attempted on the
    destination after it.
    """
    if dry_run:
        logfire.info(
            'dry run, skipping {count} commands for {target}',
            count=len(commands),
            target=str(target)
        )

        return SingleDeployResponse(
            skipped=[SkippedCommand(command) for command in commands]
        )

    if bulk:
        logfire.info(
            'overwriting {count} commands for {target}',
            count=len(commands),
            target=str(target)
        )

        try:
            result = await client.overwrite_commands(commands, target.guild_id)
        except HTTPException as e:
            if classify_error(e, target) != ErrorSeverity.LOCAL:
                raise

            logfire.warn('bulk overwrite for {target} failed: {error}', target=str(target), error=str(e))
            return SingleDeployResponse.failed(e)

        logfire.info('bulk overwrite for {target} successful', target=str(target))
        return SingleDeployResponse(commands=result)

    existing_commands: list[RemoteApplicationCommand] = []

    if not force:
        try:
            existing_commands = await client.list_commands(target.guild_id)
        except HTTPException as e:
            if classify_error(e, target) != ErrorSeverity.LOCAL:
                raise

            logfire.warn('fetching commands for {target} failed: {error}', target=str(target), error=str(e))
            return SingleDeployResponse.failed(e)

    added: list[RemoteApplicationCommand] = []
    skipped: list[SkippedCommand] = []
    errored: list[ErroredCommand] = []

    for command in commands:
        if not force:
            existing = next(
                (c for c in existing_commands if c.key == command.key),
                None
            )

            if existing is not None:
                if command_equals(existing, command):
                    logfire.debug('skipping {command}, matches {id}', command=str(command), id=existing.id)
                    skipped.append(SkippedCommand(command, existing))
                    continue

                logfire.debug(
                    'updating {command} ({reasons})',
                    command=str(command),
                    reasons=', '.join(command_diff(existing, command)) or 'options'
                )

        logfire.debug('registering {command} to {target}', command=str(command), target=str(target))

        try:
            added.append(await client.create_command(command, target.guild_id))
        except HTTPException as e:
            # ? the remaining commands would fail the same way
            if classify_error(e, target) != ErrorSeverity.LOCAL:
                raise

            logfire.warn('registering {command} failed: {error}', command=str(command), error=str(e))
            errored.append(ErroredCommand(command, e))

    logfire.info(
        'finished {target} deploy, {added} added, {skipped} skipped, {errored} errored',
        target=str(target),
        added=len(added),
        skipped=len(skipped),
        errored=len(errored)
    )

    return SingleDeployResponse(
        commands=added,
        skipped=skipped,
        errored=errored
    )


async def _deploy_target(
    client: CommandClient,
    commands: Sequence[ApplicationCommand],
    target: DeployTarget,
    force: bool,
    bulk: bool,
    dry_run: bool
) -> tuple[SingleDeployResponse | None, HTTPException | None]:
    """Returns the destination's response, or the error that halts the whole run"""
    with logfire.span(
        'deploying {count} commands to {target}',
        count=len(commands),
        target=str(target)
    ):
        try:
            return await deploy_single_destination(
                client, commands, force, bulk, dry_run, target
            ), None
        except HTTPException as e:
            if classify_error(e, target) == ErrorSeverity.RUN_FATAL:
                logfire.error('deploy halted on {target}: {error}', target=str(target), error=str(e))
                return None, e

            logfire.warn('deploy to {target} abandoned: {error}', target=str(target), error=str(e))
            return SingleDeployResponse.failed(e), None


async def deploy(
    commands: Mapping[ApplicationCommandType, Sequence[ApplicationCommandConfig]],
    client: CommandClient,
    dev_guild_id: Snowflake | None = None,
    bulk_overwrite: bool = False,
    force: bool = False,
    dry_run: bool = False
) -> DeployResponse | None:
    """Deploy every command to its destinations.

    Returns `None` when there is nothing to deploy. Destinations are deployed
    one after the other, global first, and the run is halted (`error` set on
    the response) on a 401 anywhere, or a 401 / 403 / 404 on the global or dev
    destination.
    """
    all_commands = [
        config
        for command_type in (
            ApplicationCommandType.CHAT_INPUT,
            ApplicationCommandType.USER,
            ApplicationCommandType.MESSAGE
        )
        for config in commands.get(command_type, [])
    ]

    if not all_commands:
        return None

    if dev_guild_id is not None:
        logfire.info(
            'operating in dev mode, all {count} commands deploying to {guild_id}',
            count=len(all_commands),
            guild_id=dev_guild_id
        )

        result, error = await _deploy_target(
            client,
            [config.command for config in all_commands],
            DeployTarget(dev_guild_id, dev=True),
            force, bulk_overwrite, dry_run
        )

        if error is not None:
            return DeployResponse(dev=dev_guild_id, error=error)

        assert result is not None
        return DeployResponse(
            guilds={dev_guild_id: result},
            dev=dev_guild_id
        )

    global_commands, guild_commands = separate_destinations(all_commands)

    global_result: SingleDeployResponse | None = None
    guilds: dict[Snowflake, SingleDeployResponse] = {}

    if global_commands:
        global_result, error = await _deploy_target(
            client, global_commands, GLOBAL,
            force, bulk_overwrite, dry_run
        )

        if error is not None:
            return DeployResponse(error=error)

    for guild_id, guild_command_list in guild_commands.items():
        result, error = await _deploy_target(
            client, guild_command_list, DeployTarget(guild_id),
            force, bulk_overwrite, dry_run
        )

        if error is not None:
            return DeployResponse(
                global_result=global_result,
                guilds=guilds,
                error=error
            )

        assert result is not None
        guilds[guild_id] = result

    return DeployResponse(
        global_result=global_result,
        guilds=guilds
    )
