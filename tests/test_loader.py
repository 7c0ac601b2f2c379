from pathlib import Path

import pytest

from deploy_interactions import loader
from deploy_interactions.errors import CommandLoadError
from deploy_interactions.loader import (
    get_command,
    get_folder_commands,
    group_by_type,
    load_commands,
    resolve_destinations
)
from deploy_interactions.models import ApplicationCommandType, DestinationCommand

from fakes import command


def _write(path: Path, content: str) -> Path:
    path.write_text(content)
    return path


def test_json_command(tmp_path: Path) -> None:
    loaded = get_command(_write(tmp_path / 'ping.json', '{"name": "ping", "description": "pong"}'))

    assert loaded.name == 'ping'
    assert loaded.type == ApplicationCommandType.CHAT_INPUT


def test_json_named_export(tmp_path: Path) -> None:
    path = _write(tmp_path / 'ping.json', '{"data": {"name": "ping", "description": "pong"}}')

    assert get_command(path, 'data').name == 'ping'

    with pytest.raises(CommandLoadError):
        get_command(path)


def test_python_command(tmp_path: Path) -> None:
    path = _write(tmp_path / 'inspect.py', "command = {'name': 'Inspect', 'type': 2}\n")

    loaded = get_command(path)

    assert loaded.name == 'Inspect'
    assert loaded.type == ApplicationCommandType.USER


def test_python_command_builder(tmp_path: Path) -> None:
    path = _write(tmp_path / 'ping.py', '\n'.join([
        'class Builder:',
        '    def to_dict(self):',
        "        return {'name': 'ping', 'description': 'pong'}",
        '',
        'data = Builder()',
        ''
    ]))

    assert get_command(path, 'data').name == 'ping'


def test_python_import_failure(tmp_path: Path) -> None:
    path = _write(tmp_path / 'broken.py', "raise RuntimeError('nope')\n")

    with pytest.raises(CommandLoadError, match='nope'):
        get_command(path)


def test_not_a_command(tmp_path: Path) -> None:
    with pytest.raises(CommandLoadError):
        get_command(_write(tmp_path / 'ping.json', '{"name": "ping"}'))

    with pytest.raises(CommandLoadError):
        get_command(_write(tmp_path / 'list.json', '[1, 2]'))

    with pytest.raises(CommandLoadError):
        get_command(_write(tmp_path / 'bad.json', '{"name": "', ))

    with pytest.raises(CommandLoadError):
        get_command(_write(tmp_path / 'ping.txt', 'ping'))


def test_folder_commands(tmp_path: Path) -> None:
    _write(tmp_path / 'b.json', '{"name": "b", "description": "b"}')
    _write(tmp_path / 'a.py', "command = {'name': 'a', 'description': 'a'}\n")
    _write(tmp_path / '_shared.py', "command = {'name': 'shared', 'description': 'shared'}\n")
    _write(tmp_path / 'broken.json', '{')
    _write(tmp_path / 'notes.txt', 'not a command')

    assert [c.name for c in get_folder_commands(tmp_path)] == ['a', 'b']


def test_load_commands(tmp_path: Path) -> None:
    (tmp_path / 'public').mkdir()
    (tmp_path / 'admin').mkdir()
    _write(tmp_path / 'public' / 'ping.json', '{"name": "ping", "description": "pong"}')
    _write(tmp_path / 'admin' / 'ban.json', '{"name": "ban", "description": "ban"}')

    commands, configs = load_commands([
        str(tmp_path / 'public'),
        {'path': tmp_path / 'admin', 'destinations': {'global': False, 'guild_ids': ['1234']}}
    ])

    assert [c.name for c in commands] == ['ping']
    assert len(configs) == 1
    assert configs[0].command.name == 'ban'
    assert not configs[0].global_
    assert configs[0].guild_ids == ['1234']


def test_load_commands_without_global(tmp_path: Path) -> None:
    _write(tmp_path / 'ping.json', '{"name": "ping", "description": "pong"}')

    _, configs = load_commands([{'path': str(tmp_path)}], deploy_global=False)

    assert not configs[0].global_


def test_load_commands_errors(tmp_path: Path) -> None:
    with pytest.raises(CommandLoadError):
        load_commands([str(tmp_path / 'missing')])

    with pytest.raises(CommandLoadError):
        load_commands([{'destinations': {}}])

    with pytest.raises(CommandLoadError):
        load_commands([{'path': str(tmp_path), 'destinations': {'guild_ids': ['abc']}}])


def test_resolve_destinations() -> None:
    ping = command('ping')
    ban = command('ban')
    inspect = command('inspect', type=2, description='')

    configs = resolve_destinations([ping, ban, inspect], {
        'global': [DestinationCommand(name='ping'), DestinationCommand(name='inspect', type=2)],
        '1234': [DestinationCommand(name='ban'), DestinationCommand(name='ping')],
        '5678': [DestinationCommand(name='inspect')]
    })

    assert [(c.command.name, c.global_, c.guild_ids) for c in configs] == [
        ('ping', True, ['1234']),
        ('ban', False, ['1234']),
        ('inspect', True, [])
    ]


def test_resolve_destinations_defaults_to_global() -> None:
    configs = resolve_destinations([command('ping')], None)
    assert configs[0].global_

    configs = resolve_destinations([command('ping')], None, deploy_global=False)
    assert not configs[0].global_

    configs = resolve_destinations([command('ping')], {'global': [DestinationCommand(name='ping')]}, deploy_global=False)
    assert not configs[0].global_


def test_group_by_type() -> None:
    configs = resolve_destinations([
        command('ping'),
        command('inspect', type=2, description=''),
        command('report', type=3, description=''),
        command('help')
    ], None)

    grouped = group_by_type(configs)

    assert [c.command.name for c in grouped[ApplicationCommandType.CHAT_INPUT]] == ['ping', 'help']
    assert [c.command.name for c in grouped[ApplicationCommandType.USER]] == ['inspect']
    assert [c.command.name for c in grouped[ApplicationCommandType.MESSAGE]] == ['report']


def test_exported_dict_is_not_modified(monkeypatch: pytest.MonkeyPatch) -> None:
    exported = {'name': 'ping', 'description': 'pong'}
    monkeypatch.setattr(loader, '_read_payload', lambda path, named_export: exported)

    loaded = get_command('ping.py')

    assert loaded.type == ApplicationCommandType.CHAT_INPUT
    assert exported == {'name': 'ping', 'description': 'pong'}
