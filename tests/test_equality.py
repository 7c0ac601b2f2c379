from deploy_interactions.equality import command_diff, command_equals, option_equals, options_equal
from deploy_interactions.models import ApplicationCommand, SubcommandOption

from fakes import command, remote_from


def _settings_command(**fields) -> ApplicationCommand:
    return command(
        'settings',
        options=[
            {
                'type': 1,
                'name': 'limit',
                'description': 'set a limit',
                'options': [
                    {'type': 4, 'name': 'amount', 'description': 'the limit', 'required': True, 'min_value': 1, 'max_value': 10},
                    {'type': 3, 'name': 'unit', 'description': 'the unit', 'choices': [
                        {'name': 'Seconds', 'value': 's'},
                        {'name': 'Minutes', 'value': 'm'}
                    ]}
                ]
            },
            {
                'type': 1,
                'name': 'log',
                'description': 'set the log channel',
                'options': [
                    {'type': 7, 'name': 'channel', 'description': 'the channel', 'channel_types': [0, 5]}
                ]
            }
        ],
        **fields
    )


def test_registered_command_equals_its_definition() -> None:
    local = _settings_command()

    assert command_equals(remote_from(local), local)
    assert command_diff(remote_from(local), local) == []


def test_option_order_is_ignored() -> None:
    local = _settings_command()
    payload = local.as_payload()
    payload['options'] = list(reversed(payload['options']))

    for option in payload['options']:
        option['options'] = list(reversed(option['options']))

    assert command_equals(remote_from(payload), local)


def test_choice_value_change_is_detected() -> None:
    local = _settings_command()
    payload = local.as_payload()
    payload['options'][0]['options'][1]['choices'][1]['value'] = 'h'

    assert not command_equals(remote_from(payload), local)


def test_choice_order_is_ignored() -> None:
    local = _settings_command()
    payload = local.as_payload()
    choices = payload['options'][0]['options'][1]['choices']
    payload['options'][0]['options'][1]['choices'] = list(reversed(choices))

    assert command_equals(remote_from(payload), local)


def test_channel_types_compare_as_sets() -> None:
    local = _settings_command()

    reordered = local.as_payload()
    reordered['options'][1]['options'][0]['channel_types'] = [5, 0]
    assert command_equals(remote_from(reordered), local)

    changed = local.as_payload()
    changed['options'][1]['options'][0]['channel_types'] = [0, 2]
    assert not command_equals(remote_from(changed), local)


def test_numeric_bounds() -> None:
    local = _settings_command()

    changed = local.as_payload()
    changed['options'][0]['options'][0]['max_value'] = 20
    assert not command_equals(remote_from(changed), local)

    dropped = local.as_payload()
    del dropped['options'][0]['options'][0]['min_value']
    assert not command_equals(remote_from(dropped), local)


def test_required_defaults_to_false() -> None:
    local = command('ping', options=[{'type': 5, 'name': 'ephemeral', 'description': 'hide it'}])
    remote = remote_from(
        command('ping', options=[{'type': 5, 'name': 'ephemeral', 'description': 'hide it', 'required': False}])
    )

    assert command_equals(remote, local)


def test_required_change_is_detected() -> None:
    local = command('ping', options=[{'type': 5, 'name': 'ephemeral', 'description': 'hide it'}])
    remote = remote_from(
        command('ping', options=[{'type': 5, 'name': 'ephemeral', 'description': 'hide it', 'required': True}])
    )

    assert not command_equals(remote, local)


def test_missing_option_is_detected() -> None:
    local = command('ping', options=[{'type': 5, 'name': 'ephemeral', 'description': 'hide it'}])

    assert not command_equals(remote_from(command('ping')), local)
    assert not command_equals(remote_from(local), command('ping'))


def test_renamed_option_is_detected() -> None:
    local = command('ping', options=[{'type': 5, 'name': 'ephemeral', 'description': 'hide it'}])
    remote = remote_from(
        command('ping', options=[{'type': 5, 'name': 'hidden', 'description': 'hide it'}])
    )

    assert not command_equals(remote, local)


def test_autocomplete_ignores_choices() -> None:
    local = command('search', options=[{'type': 3, 'name': 'query', 'description': 'query', 'autocomplete': True}])
    remote = remote_from(
        command('search', options=[{'type': 3, 'name': 'query', 'description': 'query', 'autocomplete': True}]),
        options=[{'type': 3, 'name': 'query', 'description': 'query', 'autocomplete': True, 'choices': []}]
    )

    assert command_equals(remote, local)

    toggled = remote_from(
        command('search', options=[{'type': 3, 'name': 'query', 'description': 'query'}])
    )

    assert not command_equals(toggled, local)


def test_context_menu_without_description() -> None:
    local = ApplicationCommand.model_validate({'name': 'Inspect', 'type': 2})
    remote = remote_from({'name': 'Inspect', 'type': 2, 'description': ''})

    assert command_equals(remote, local)


def test_description_change_is_detected() -> None:
    local = command('ping')
    remote = remote_from(command('ping', description='pong'))

    assert not command_equals(remote, local)
    assert command_diff(remote, local) == ["description ('ping command' != 'pong')"]


def test_type_change_is_detected() -> None:
    local = ApplicationCommand.model_validate({'name': 'Inspect', 'type': 2})
    remote = remote_from({'name': 'Inspect', 'type': 3, 'description': ''})

    assert not command_equals(remote, local)


def test_dm_permission_only_compared_on_global_commands() -> None:
    local = command('ping')

    assert command_equals(remote_from(local, guild_id='3000', dm_permission=False), local)
    assert not command_equals(remote_from(local, dm_permission=False), local)
    assert command_equals(remote_from(local, dm_permission=True), local)


def test_default_member_permissions() -> None:
    local = command('ban', default_member_permissions=4)

    assert local.default_member_permissions == '4'
    assert command_equals(remote_from(local), local)
    assert not command_equals(remote_from(local, default_member_permissions='8'), local)
    assert not command_equals(remote_from(local, default_member_permissions=None), local)


def test_null_localizations_equal_omitted_ones() -> None:
    local = command('ping')
    remote = remote_from(local, name_localizations=None, description_localizations=None)

    assert command_equals(remote, local)

    localized = remote_from(local, name_localizations={'de': 'pingen'})

    assert not command_equals(localized, local)


def test_options_equal_requires_same_length() -> None:
    local = _settings_command()
    remote = remote_from(local)

    assert options_equal(remote.options, local.options)
    assert not options_equal(remote.options, local.options[:1])


def test_subcommand_option_equals() -> None:
    local = _settings_command()
    remote = remote_from(local)

    assert isinstance(local.options[0], SubcommandOption)
    assert option_equals(remote.options[0], local.options[0])
    assert not option_equals(remote.options[0], local.options[1])


def test_unknown_types_compare_by_value() -> None:
    local = command('log', options=[
        {'type': 7, 'name': 'channel', 'description': 'channel', 'channel_types': [17, 0]},
        {'type': 12, 'name': 'future', 'description': 'new option type'}
    ])

    remote = remote_from(command('log', options=[
        {'type': 7, 'name': 'channel', 'description': 'channel', 'channel_types': [0, 17]},
        {'type': 12, 'name': 'future', 'description': 'new option type'}
    ]))

    assert command_equals(remote, local)

    changed = remote_from(command('log', options=[
        {'type': 7, 'name': 'channel', 'description': 'channel', 'channel_types': [0, 18]},
        {'type': 12, 'name': 'future', 'description': 'new option type'}
    ]))

    assert not command_equals(changed, local)
