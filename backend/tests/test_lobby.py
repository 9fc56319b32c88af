import pytest

from speedwurdz.lobby import GameNotFoundError, LobbyError, TableNotFoundError, TableRegistry
from speedwurdz.services.games.session import PLAYING, WAITING_TO_START


@pytest.fixture()
def registry(dictionary):
    reg = TableRegistry(dictionary=dictionary, max_users=3)
    reg.join_lobby('sid-a', 'alice')
    reg.join_lobby('sid-b', 'bob')
    return reg


def test_starting_tiles_defaults(registry):
    assert registry.create_table('alice', max_players=2).starting_tiles == 75
    assert registry.create_table('alice', max_players=6).starting_tiles == 150
    assert registry.create_table('alice', starting_tiles=20).starting_tiles == 75


def test_get_game_needs_an_entered_game(registry):
    table = registry.create_table('alice')
    with pytest.raises(GameNotFoundError, match='Game not found'):
        registry.get_game(table.id)
    with pytest.raises(GameNotFoundError):
        registry.get_game('missing')

    registry.start_game('alice', table.id)
    game = registry.get_game(table.id)
    assert game is table
    assert game.session.status == WAITING_TO_START
    assert list(game.session.players) == ['alice']


def test_unknown_table(registry):
    with pytest.raises(TableNotFoundError):
        registry.get('missing')


def test_host_passes_on_and_last_player_closes(registry):
    table = registry.create_table('alice')
    registry.join_table('bob', table.id)

    _, deleted = registry.leave_table('alice', table.id)
    assert not deleted
    assert table.host == 'bob'

    _, deleted = registry.leave_table('bob', table.id)
    assert deleted
    assert registry.tables == {}


def test_running_game_keeps_its_roster(registry):
    table = registry.create_table('alice')
    registry.join_table('bob', table.id)
    registry.start_game('alice', table.id)
    table.session.begin_play()
    assert table.session.status == PLAYING

    with pytest.raises(LobbyError, match='Resign to leave a running game'):
        registry.leave_table('bob', table.id)
    username, changed = registry.disconnect('sid-b')
    assert username == 'bob'
    assert changed == []
    assert table.players == ['alice', 'bob']


def test_finished_game_can_be_left(registry):
    table = registry.create_table('alice')
    registry.start_game('alice', table.id)
    table.session.begin_play()
    table.session.finish(winner='alice')

    _, changed = registry.disconnect('sid-a')
    assert changed == [(table, True)]
    assert registry.tables == {}


def test_lobby_cap(registry):
    registry.join_lobby('sid-c', 'carol')
    with pytest.raises(LobbyError, match='Server is full'):
        registry.join_lobby('sid-d', 'dave')
