from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

# Tile states
POOL = 'pool'
HAND = 'hand'
BOARD = 'board'

# Table statuses
TABLE_WAITING = 'waiting'
TABLE_PLAYING = 'playing'


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Tile:
    id: int
    letter: str
    state: str = POOL
    owner: Optional[str] = None
    position: Optional[Tuple[int, int]] = None

    def to_pool(self) -> None:
        self.state = POOL
        self.owner = None
        self.position = None

    def to_hand(self, username: str) -> None:
        self.state = HAND
        self.owner = username
        self.position = None

    def to_board(self, x: int, y: int) -> None:
        self.state = BOARD
        self.position = (x, y)

    def summary(self) -> Dict[str, Any]:
        return {'id': self.id, 'letter': self.letter}

    def to_dict(self):
        return {
            'id': self.id,
            'letter': self.letter,
            'state': self.state,
            'owner': self.owner,
            'position': {'x': self.position[0], 'y': self.position[1]} if self.position else None,
        }


@dataclass
class Player:
    username: str
    hand: List[int] = field(default_factory=list)
    view_position: Tuple[int, int] = (0, 0)
    tiles_trash_count: int = 0
    valid_submissions: int = 0
    last_valid_board: list = field(default_factory=list)
    resigned: bool = False

    def to_dict(self, tiles: Dict[int, Tile]):
        """Serialize the player; hand and board are resolved against the session's tiles."""
        board = {}
        for tile in tiles.values():
            if tile.state == BOARD and tile.owner == self.username:
                x, y = tile.position
                board[f"{x},{y}"] = {'id': tile.id, 'letter': tile.letter, 'x': x, 'y': y}
        return {
            'username': self.username,
            'hand': [tiles[tile_id].summary() for tile_id in self.hand],
            'board': {
                'tiles': board,
                'viewPosition': {'x': self.view_position[0], 'y': self.view_position[1]},
            },
            'tilesTrashCount': self.tiles_trash_count,
            'validSubmissions': self.valid_submissions,
            'lastValidBoard': [p.model_dump(by_alias=True) for p in self.last_valid_board],
            'resigned': self.resigned,
        }


@dataclass
class Table:
    id: str
    name: str
    host: str
    players: List[str]
    max_players: int
    starting_tiles: int
    status: str = TABLE_WAITING
    created: datetime = field(default_factory=utcnow)
    session: Any = None

    @property
    def room(self) -> str:
        return f"table-{self.id}"

    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'host': self.host,
            'players': list(self.players),
            'maxPlayers': self.max_players,
            'startingTiles': self.starting_tiles,
            'status': self.status,
            'created': self.created.isoformat(),
            'gameStatus': self.session.status if self.session else None,
        }
