import logging
import random
import string
import threading
from typing import Dict, List, Optional, Tuple

from speedwurdz.models import TABLE_PLAYING, TABLE_WAITING, Table
from speedwurdz.services.games.session import PLAYING, GameSession

logger = logging.getLogger(__name__)


class LobbyError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TableNotFoundError(LobbyError):
    def __init__(self, message: str = 'Table not found'):
        super().__init__(message)


class GameNotFoundError(LobbyError):
    def __init__(self, message: str = 'Game not found'):
        super().__init__(message)


def generate_table_id(existing, length=12):
    """Generate a unique, random table id."""
    while True:
        table_id = ''.join(random.choices(string.ascii_lowercase + string.digits, k=length))
        if table_id not in existing:
            return table_id


class TableRegistry:
    """Connected users and their tables; hosts one GameSession per started table."""

    def __init__(self, dictionary=None, max_users: int = 50, default_max_players: int = 4,
                 min_starting_tiles: int = 75, tiles_per_seat: int = 25,
                 tiles_per_player: int = 10, enforce_occupancy: bool = False):
        self.dictionary = dictionary
        self.max_users = max_users
        self.default_max_players = default_max_players
        self.min_starting_tiles = min_starting_tiles
        self.tiles_per_seat = tiles_per_seat
        self.tiles_per_player = tiles_per_player
        self.enforce_occupancy = enforce_occupancy
        self.users: Dict[str, str] = {}  # sid -> username
        self.tables: Dict[str, Table] = {}
        self.lock = threading.RLock()

    @classmethod
    def from_config(cls, config, dictionary) -> 'TableRegistry':
        return cls(
            dictionary=dictionary,
            max_users=int(config.get('MAX_USERS', 50)),
            default_max_players=int(config.get('DEFAULT_MAX_PLAYERS', 4)),
            min_starting_tiles=int(config.get('MIN_STARTING_TILES', 75)),
            tiles_per_seat=int(config.get('TILES_PER_SEAT', 25)),
            tiles_per_player=int(config.get('TILES_PER_PLAYER', 10)),
            enforce_occupancy=bool(config.get('ENFORCE_BOARD_OCCUPANCY', False)),
        )

    # ---- users ----

    def join_lobby(self, sid: str, username) -> str:
        username = (username or '').strip() if isinstance(username, str) else ''
        with self.lock:
            if not username:
                raise LobbyError('Username is required')
            if sid in self.users:
                raise LobbyError('You have already joined the lobby')
            if username in self.users.values():
                raise LobbyError('Username already taken')
            if len(self.users) >= self.max_users:
                raise LobbyError('Server is full')
            self.users[sid] = username
            logger.info(f"[lobby-join] user={username} users={len(self.users)}")
            return username

    def username_for(self, sid: str) -> Optional[str]:
        return self.users.get(sid)

    def usernames(self) -> List[str]:
        return list(self.users.values())

    def disconnect(self, sid: str) -> Tuple[Optional[str], List[Tuple[Table, bool]]]:
        """Drop a user. Tables whose game is running keep the player on their roster.

        Returns the username and the (table, deleted) pairs that changed.
        """
        with self.lock:
            username = self.users.pop(sid, None)
            if username is None:
                return None, []
            changed = []
            for table in list(self.tables.values()):
                if username not in table.players:
                    continue
                if table.session is not None and table.session.status == PLAYING:
                    continue
                changed.append((table, self._remove_from_table(table, username)))
            logger.info(f"[disconnect] user={username} tables_changed={len(changed)}")
            return username, changed

    # ---- tables ----

    def get(self, table_id) -> Table:
        table = self.tables.get(table_id)
        if table is None:
            raise TableNotFoundError()
        return table

    def get_game(self, table_id) -> Table:
        """The table for ``table_id``, provided its game screen has been entered."""
        table = self.tables.get(table_id)
        if table is None or table.session is None:
            raise GameNotFoundError()
        return table

    def create_table(self, username: str, name: Optional[str] = None, max_players: Optional[int] = None,
                     starting_tiles: Optional[int] = None) -> Table:
        max_players = max_players or self.default_max_players
        if starting_tiles is None:
            starting_tiles = max_players * self.tiles_per_seat
        with self.lock:
            table = Table(
                id=generate_table_id(self.tables),
                name=name or f"{username}'s Game",
                host=username,
                players=[username],
                max_players=max_players,
                starting_tiles=max(self.min_starting_tiles, starting_tiles),
            )
            self.tables[table.id] = table
            logger.info(f"[table-create] table={table.id} host={username} max={max_players} tiles={table.starting_tiles}")
            return table

    def join_table(self, username: str, table_id) -> Table:
        with self.lock:
            table = self.get(table_id)
            if table.is_full():
                raise LobbyError('Table is full')
            if username in table.players:
                raise LobbyError('You are already in this table')
            if table.status != TABLE_WAITING:
                raise LobbyError('Game has already started')
            table.players.append(username)
            logger.info(f"[table-join] table={table.id} user={username}")
            return table

    def leave_table(self, username: str, table_id) -> Tuple[Table, bool]:
        with self.lock:
            table = self.get(table_id)
            if username not in table.players:
                raise LobbyError('You are not in this table')
            if table.session is not None and table.session.status == PLAYING:
                raise LobbyError('Resign to leave a running game')
            return table, self._remove_from_table(table, username)

    def _remove_from_table(self, table: Table, username: str) -> bool:
        table.players = [p for p in table.players if p != username]
        if table.session is not None and username in table.session.players:
            table.session.remove_player(username)
        if not table.players:
            self.close_table(table.id)
            return True
        if table.host == username:
            table.host = table.players[0]
            logger.info(f"[host-change] table={table.id} host={table.host}")
        return False

    def close_table(self, table_id) -> Optional[Table]:
        with self.lock:
            table = self.tables.pop(table_id, None)
            if table is not None and table.session is not None:
                table.session.teardown()
            if table is not None:
                logger.info(f"[table-close] table={table_id}")
            return table

    def start_game(self, username: str, table_id) -> Table:
        """Move a waiting table into its game screen with a fresh session."""
        with self.lock:
            table = self.get(table_id)
            if table.host != username:
                raise LobbyError('Only the host can start the game')
            if table.status != TABLE_WAITING:
                raise LobbyError('Game has already started')
            if not table.players:
                raise LobbyError('Need at least 1 player to start')
            table.status = TABLE_PLAYING
            table.session = GameSession(
                table.id,
                list(table.players),
                starting_tiles=table.starting_tiles,
                dictionary=self.dictionary,
                tiles_per_player=self.tiles_per_player,
                enforce_occupancy=self.enforce_occupancy,
            )
            logger.info(f"[enter-game] table={table.id} players={table.players}")
            return table

    # ---- payloads ----

    def tables_payload(self) -> List[dict]:
        with self.lock:
            return [t.to_dict() for t in self.tables.values()]

    def table_event(self, table: Table) -> dict:
        return {'table': table.to_dict(), 'tables': self.tables_payload()}
