from flask import current_app, request
from flask_socketio import close_room, emit, join_room, leave_room
from pydantic import ValidationError

from speedwurdz import get_registry, socketio
from speedwurdz.lobby import GameNotFoundError, LobbyError
from speedwurdz.schemas import (
    ACTION_TAGS,
    CreateTable,
    MoveBoard,
    MoveTileOnBoard,
    PlaceTile,
    ReturnTileToHand,
    SubmitBoard,
    TrashTile,
    parse_game_action,
)
from speedwurdz.services.games.errors import GameError
from speedwurdz.services.games.scheduler import schedule_countdown

NAMESPACE = '/ws'
LOBBY = 'lobby'


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _error(message: str) -> None:
    emit('error', {'message': message})


def _to_room(event, payload, room):
    socketio.emit(event, payload, to=room, namespace=NAMESPACE)


def _table_id(data):
    if isinstance(data, dict):
        return data.get('tableId')
    return data


def _find_game(data):
    """Resolve the caller and the table whose game they address, or raise GameNotFoundError."""
    registry = get_registry()
    username = registry.username_for(_get_sid())
    if not username:
        raise GameNotFoundError()
    return registry, username, registry.get_game(_table_id(data))


def _broadcast_state(table, session):
    _to_room('game-state-updated', {'gameState': session.to_dict()}, table.room)


def _announce_departure(username, table, deleted):
    registry = get_registry()
    if deleted:
        _to_room('table-deleted', {'tableId': table.id, 'tables': registry.tables_payload()}, LOBBY)
        return
    _to_room('player-left', {'username': username, 'table': table.to_dict()}, table.room)
    _to_room('table-updated', registry.table_event(table), LOBBY)


# ---- connection & lobby ----

def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    username, changed = get_registry().disconnect(_get_sid())
    if username is None:
        return
    for table, deleted in changed:
        _announce_departure(username, table, deleted)
    _to_room('user-left', {'username': username, 'users': get_registry().usernames()}, LOBBY)


def handle_join_lobby(username):
    registry = get_registry()
    try:
        name = registry.join_lobby(_get_sid(), username)
    except LobbyError as exc:
        _error(exc.message)
        return
    join_room(LOBBY)
    emit('lobby-joined', {
        'username': name,
        'users': registry.usernames(),
        'tables': registry.tables_payload(),
    })
    emit('user-joined', {'username': name, 'users': registry.usernames()}, to=LOBBY, include_self=False)


def handle_create_table(data):
    registry = get_registry()
    username = registry.username_for(_get_sid())
    if not username:
        _error('You must join the lobby first')
        return
    try:
        options = CreateTable.model_validate(data or {})
    except ValidationError:
        _error('Invalid table settings')
        return
    table = registry.create_table(username, options.name, options.max_players, options.starting_tiles)
    join_room(table.room)
    _to_room('table-created', registry.table_event(table), LOBBY)
    emit('table-joined', table.to_dict())


def handle_join_table(data):
    registry = get_registry()
    username = registry.username_for(_get_sid())
    if not username:
        _error('You must join the lobby first')
        return
    try:
        table = registry.join_table(username, _table_id(data))
    except LobbyError as exc:
        _error(exc.message)
        return
    join_room(table.room)
    _to_room('player-joined', {'username': username, 'table': table.to_dict()}, table.room)
    _to_room('table-updated', registry.table_event(table), LOBBY)
    emit('table-joined', table.to_dict())


def handle_leave_table(data):
    registry = get_registry()
    username = registry.username_for(_get_sid())
    if not username:
        return
    try:
        table, deleted = registry.leave_table(username, _table_id(data))
    except LobbyError as exc:
        _error(exc.message)
        return
    leave_room(table.room)
    _announce_departure(username, table, deleted)
    current_app.logger.info(f"[table-leave] table={table.id} user={username} deleted={deleted}")


# ---- game lifecycle ----

def handle_start_game(data):
    registry = get_registry()
    username = registry.username_for(_get_sid())
    if not username:
        _error('Table not found')
        return
    try:
        table = registry.start_game(username, _table_id(data))
    except LobbyError as exc:
        _error(exc.message)
        return
    _to_room('enter-game', {'table': table.to_dict(), 'gameState': table.session.to_dict()}, table.room)
    _to_room('table-updated', registry.table_event(table), LOBBY)


def handle_start_gameplay(data):
    try:
        registry, username, table = _find_game(data)
    except LobbyError as exc:
        _error(exc.message)
        return
    if table.host != username:
        _error('Only the host can start the gameplay')
        return
    try:
        table.session.start_countdown(int(current_app.config.get('COUNTDOWN_SECONDS', 3)))
    except GameError as exc:
        _error(exc.message)
        return
    _to_room('countdown-started', {'gameState': table.session.to_dict()}, table.room)
    schedule_countdown(current_app._get_current_object(), registry, table, NAMESPACE)


def handle_resign_game(data):
    try:
        registry, username, table = _find_game(data)
    except LobbyError as exc:
        _error(exc.message)
        return
    try:
        table.session.resign(username)
    except GameError as exc:
        _error(exc.message)
        return
    _to_room('return-to-lobby', {'reason': f"{username} resigned - game ended"}, table.room)
    close_room(table.room, namespace=NAMESPACE)
    registry.close_table(table.id)
    _to_room('table-deleted', {'tableId': table.id, 'tables': registry.tables_payload()}, LOBBY)


def handle_request_game_state(data):
    try:
        _, _, table = _find_game(data)
    except LobbyError as exc:
        _error(exc.message)
        return
    emit('game-state-updated', {'gameState': table.session.to_dict()})


# ---- in-game actions ----

def _move_board(table, session, username, action: MoveBoard):
    session.move_board(username, action.direction, action.amount)
    player = session.player(username)
    emit('board-updated', {'board': player.to_dict(session.tiles)['board']})


def _place_tile(table, session, username, action: PlaceTile):
    tile = session.place_tile(username, action.tile_id, action.x, action.y)
    emit('tile-placed-on-my-board', {'tileId': tile.id, 'tile': tile.to_dict(), 'x': action.x, 'y': action.y})
    _broadcast_state(table, session)


def _return_tile_to_hand(table, session, username, action: ReturnTileToHand):
    session.return_tile_to_hand(username, action.tile_id)
    _broadcast_state(table, session)


def _move_tile_on_board(table, session, username, action: MoveTileOnBoard):
    tile = session.move_tile_on_board(
        username, action.tile_id, action.from_x, action.from_y, action.to_x, action.to_y
    )
    emit('tile-moved-on-board', {
        'tileId': tile.id,
        'tile': tile.to_dict(),
        'fromX': action.from_x,
        'fromY': action.from_y,
        'toX': action.to_x,
        'toY': action.to_y,
    })
    _broadcast_state(table, session)


def _trash_tile(table, session, username, action: TrashTile):
    trashed, drawn = session.trash_tile(username, action.tile_id)
    emit('tile-exchange-complete', {
        'trashedTile': trashed.to_dict(),
        'newTiles': [t.summary() for t in drawn],
        'newHandSize': len(session.player(username).hand),
        'tilesRemaining': len(session.pool_tiles()),
    })
    _broadcast_state(table, session)


def _submit_board(table, session, username, action: SubmitBoard):
    result = session.submit_board(username, action.board_data)
    if not result.valid:
        payload = {'reason': result.reason, 'invalidTiles': []}
        if result.invalid_words:
            payload['invalidWords'] = [w.to_dict() for w in result.invalid_words]
        emit('board-submission-failed', payload)
        return
    if result.winner:
        _to_room('game-over', {
            'winner': result.winner,
            'playerStats': session.final_stats(),
            'message': f"{result.winner} wins the game!",
        }, table.room)
        _broadcast_state(table, session)
        return
    _to_room('board-submitted-success', {
        'submitterId': username,
        'tilesSubmitted': result.tiles_submitted,
        'message': 'NEXT!!',
    }, table.room)
    _broadcast_state(table, session)


ACTION_HANDLERS = {
    MoveBoard: _move_board,
    PlaceTile: _place_tile,
    ReturnTileToHand: _return_tile_to_hand,
    MoveTileOnBoard: _move_tile_on_board,
    SubmitBoard: _submit_board,
    TrashTile: _trash_tile,
}


def handle_game_action(data):
    data = data if isinstance(data, dict) else {}
    try:
        _, username, table = _find_game(data)
    except LobbyError as exc:
        _error(exc.message)
        return
    if data.get('action') not in ACTION_TAGS:
        _error('Unknown game action')
        return
    try:
        action = parse_game_action(data)
    except ValidationError:
        _error('Invalid game action')
        return
    try:
        ACTION_HANDLERS[type(action)](table, table.session, username, action)
    except GameError as exc:
        current_app.logger.warning(
            f"[action-rejected] table={table.id} user={username} action={data.get('action')} reason={exc.message}"
        )
        _error(exc.message)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('join-lobby', handle_join_lobby, namespace=NAMESPACE)
    socketio.on_event('create-table', handle_create_table, namespace=NAMESPACE)
    socketio.on_event('join-table', handle_join_table, namespace=NAMESPACE)
    socketio.on_event('leave-table', handle_leave_table, namespace=NAMESPACE)
    socketio.on_event('start-game', handle_start_game, namespace=NAMESPACE)
    socketio.on_event('start-gameplay', handle_start_gameplay, namespace=NAMESPACE)
    socketio.on_event('game-action', handle_game_action, namespace=NAMESPACE)
    socketio.on_event('resign-game', handle_resign_game, namespace=NAMESPACE)
    socketio.on_event('request-game-state', handle_request_game_state, namespace=NAMESPACE)
