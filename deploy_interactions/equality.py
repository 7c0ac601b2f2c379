"""Structural equality between local command definitions and registered commands.

Discord fills in defaults for several omitted fields (`type`, `required`,
`autocomplete`, `dm_permission`, empty localizations), so a definition and the
command it produced are compared after filling in those defaults on both sides.
Options are matched by name at every level, their order is irrelevant.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .missing import is_not_missing, or_default
from .models import (
    ChannelOption,
    ChoicesOption,
    NumericOption,
    SubcommandOption
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import (
        ApplicationCommand,
        Choice,
        Option,
        RemoteApplicationCommand
    )


__all__ = (
    'command_diff',
    'command_equals',
    'normalize_command',
    'normalize_option',
    'option_equals',
    'options_equal',
)


def normalize_option(option: Option) -> dict[str, Any]:
    normalized: dict[str, Any] = {
        'name': option.name,
        'type': option.type,
        'description': option.description,
        'required': or_default(option.required, False),
        'name_localizations': or_default(option.name_localizations, {}),
        'description_localizations': or_default(option.description_localizations, {}),
    }

    match option:
        case ChoicesOption():
            normalized['autocomplete'] = or_default(option.autocomplete, False)
            normalized['choices'] = or_default(option.choices, [])

            # ? bounds are never defaulted, an absent bound differs from every number
            if isinstance(option, NumericOption):
                normalized['min_value'] = option.min_value
                normalized['max_value'] = option.max_value
        case ChannelOption():
            normalized['channel_types'] = or_default(option.channel_types, [])
        case SubcommandOption():
            normalized['options'] = or_default(option.options, [])

    return normalized


def normalize_command(command: ApplicationCommand) -> dict[str, Any]:
    return {
        'name': command.name,
        'description': command.description,
        'type': command.effective_type,
        'options': or_default(command.options, []),
        'default_member_permissions': command.default_member_permissions,
        'dm_permission': or_default(command.dm_permission, True),
        'name_localizations': or_default(command.name_localizations, {}),
        'description_localizations': or_default(command.description_localizations, {}),
    }


def _choices_equal(
    existing: Sequence[Choice],
    choices: Sequence[Choice]
) -> bool:
    if len(existing) != len(choices):
        return False

    for choice in existing:
        found = next(
            (c for c in choices if c.name == choice.name),
            None
        )

        if found is None or found.value != choice.value:
            return False

    return True


def option_equals(existing: Option, option: Option) -> bool:
    live, local = normalize_option(existing), normalize_option(option)

    if (
        local['name'] != live['name'] or
        local['type'] != live['type'] or
        local['description'] != live['description'] or
        local['required'] != live['required'] or
        local['name_localizations'] != live['name_localizations'] or
        local['description_localizations'] != live['description_localizations']
    ):
        return False

    match existing, option:
        case (ChoicesOption(), ChoicesOption()):
            if local['autocomplete'] != live['autocomplete']:
                return False

            if (
                not local['autocomplete'] and
                not _choices_equal(live['choices'], local['choices'])
            ):
                return False

            if isinstance(existing, NumericOption) and isinstance(option, NumericOption):
                return (
                    local['min_value'] == live['min_value'] and
                    local['max_value'] == live['max_value']
                )
        case (SubcommandOption(), SubcommandOption()):
            if len(live['options']) != len(local['options']):
                return False

            return options_equal(live['options'], local['options'])
        case (ChannelOption(), ChannelOption()):
            # ? equal lengths plus one way containment is set equality
            return (
                len(live['channel_types']) == len(local['channel_types']) and
                all(
                    channel_type in local['channel_types']
                    for channel_type in live['channel_types']
                )
            )

    return True


def options_equal(
    existing: Sequence[Option],
    options: Sequence[Option]
) -> bool:
    if len(existing) != len(options):
        return False

    for live_option in existing:
        # ? duplicate names are invalid on discord's side, first match wins
        local_option = next(
            (o for o in options if o.name == live_option.name),
            None
        )

        if local_option is None or not option_equals(live_option, local_option):
            return False

    return True


def command_equals(
    existing: RemoteApplicationCommand,
    command: ApplicationCommand
) -> bool:
    live, local = normalize_command(existing), normalize_command(command)

    if (
        local['name'] != live['name'] or
        # ? context menu commands may omit the description entirely
        (is_not_missing(command.description) and local['description'] != live['description']) or
        local['type'] != live['type'] or
        len(local['options']) != len(live['options']) or
        local['default_member_permissions'] != live['default_member_permissions'] or
        # ? dm_permission is meaningless on guild commands
        (existing.is_global and local['dm_permission'] != live['dm_permission']) or
        local['name_localizations'] != live['name_localizations'] or
        local['description_localizations'] != live['description_localizations']
    ):
        return False

    if local['options'] and live['options']:
        return options_equal(live['options'], local['options'])

    return True


def command_diff(
    existing: RemoteApplicationCommand,
    command: ApplicationCommand
) -> list[str]:
    """Every top level field that keeps `command_equals` from matching, for logging"""
    live, local = normalize_command(existing), normalize_command(command)
    reasons = []

    for field, value in local.items():
        match field:
            case 'description' if not is_not_missing(value):
                continue
            case 'dm_permission' if not existing.is_global:
                continue
            case 'options':
                if (
                    len(value) != len(live['options']) or
                    (value and not options_equal(live['options'], value))
                ):
                    reasons.append(
                        f'options ({[o.name for o in value]} != {[o.name for o in live["options"]]})'
                    )

                continue

        if value != live[field]:
            reasons.append(f'{field} ({value!r} != {live[field]!r})')

    return reasons
