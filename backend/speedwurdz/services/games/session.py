import logging
import random
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from speedwurdz.models import BOARD, HAND, POOL, Player, Tile, utcnow
from speedwurdz.schemas import Placement
from .board import Word, check_connected, extract_words
from .errors import (
    EmptySubmissionError,
    GameNotInProgressError,
    InvalidTransitionError,
    NotInGameError,
    PoolExhaustedError,
    PositionMismatchError,
    TileStateError,
)
from .scoring import score_board
from .tile_pool import generate_tile_pool

logger = logging.getLogger(__name__)

# Session statuses
WAITING_TO_START = 'waiting-to-start'
COUNTDOWN = 'countdown'
PLAYING = 'playing'
FINISHED = 'finished'

DEFAULT_COUNTDOWN_SECONDS = 3
MIN_STARTING_TILES = 75
TILES_PER_PLAYER = 10
TRASH_EXCHANGE_COUNT = 3
VIEW_LIMIT = 40
SCROLL_STEP = 2

SCROLL_VECTORS = {
    'up': (0, -1),
    'down': (0, 1),
    'left': (-1, 0),
    'right': (1, 0),
}


@dataclass
class SubmissionResult:
    valid: bool
    tiles_submitted: int
    reason: Optional[str] = None
    words: List[Word] = field(default_factory=list)
    invalid_words: List[Word] = field(default_factory=list)
    winner: Optional[str] = None
    dealt: Dict[str, int] = field(default_factory=dict)


class GameSession:
    """Authoritative state of one table's game.

    The session owns every tile of the game in ``tiles`` and every player's
    record. Each public method runs under ``lock`` and either completes or
    raises a ``GameError`` without touching state.
    """

    def __init__(self, table_id: str, usernames: List[str], starting_tiles: int = MIN_STARTING_TILES,
                 dictionary=None, tiles_per_player: int = TILES_PER_PLAYER,
                 enforce_occupancy: bool = False, rng: Optional[random.Random] = None):
        self.table_id = table_id
        self.players: Dict[str, Player] = {name: Player(username=name) for name in usernames}
        self.tiles: Dict[int, Tile] = {}
        self.status = WAITING_TO_START
        self.countdown_timer: Optional[int] = None
        self.start_time = None
        self.end_time = None
        self.winner: Optional[str] = None
        self.starting_tiles = max(MIN_STARTING_TILES, starting_tiles)
        self.tiles_per_player = tiles_per_player
        self.enforce_occupancy = enforce_occupancy
        self.dictionary = dictionary
        self.rng = rng or random.Random()
        self.countdown = None  # CountdownHandle while counting down
        self.lock = threading.RLock()

    # ---- lookups ----

    def player(self, username: str) -> Optional[Player]:
        return self.players.get(username)

    def pool_tiles(self) -> List[Tile]:
        return [t for t in self.tiles.values() if t.state == POOL]

    def tile_state_counts(self) -> Dict[str, int]:
        counts = Counter(t.state for t in self.tiles.values())
        return {POOL: counts[POOL], HAND: counts[HAND], BOARD: counts[BOARD]}

    def _acting_player(self, username: str) -> Player:
        player = self.players.get(username)
        if player is None or player.resigned:
            raise NotInGameError()
        if self.status != PLAYING:
            raise GameNotInProgressError()
        return player

    def _board_tile_at(self, username: str, x: int, y: int) -> Optional[Tile]:
        for tile in self.tiles.values():
            if tile.state == BOARD and tile.owner == username and tile.position == (x, y):
                return tile
        return None

    def _check_destination(self, username: str, x: int, y: int) -> None:
        if self.enforce_occupancy and self._board_tile_at(username, x, y) is not None:
            raise TileStateError('Position already occupied')

    def _give(self, player: Player, tile: Tile) -> None:
        tile.to_hand(player.username)
        player.hand.append(tile.id)

    # ---- lifecycle ----

    def start_countdown(self, seconds: int = DEFAULT_COUNTDOWN_SECONDS) -> None:
        with self.lock:
            if self.status != WAITING_TO_START:
                raise InvalidTransitionError('Game cannot be started right now')
            if not self.players:
                raise InvalidTransitionError('Need at least 1 player to start')
            self.status = COUNTDOWN
            self.countdown_timer = seconds
            logger.info(f"[countdown-start] table={self.table_id} seconds={seconds}")

    def tick_countdown(self) -> Optional[int]:
        """Advance the countdown by one tick.

        Returns the remaining count, or ``None`` when the session is no longer
        counting down and the timer should stop.
        """
        with self.lock:
            if self.status != COUNTDOWN:
                return None
            self.countdown_timer -= 1
            remaining = self.countdown_timer
            if remaining <= 0:
                self.begin_play()
            return remaining

    def begin_play(self) -> None:
        with self.lock:
            if self.status not in (WAITING_TO_START, COUNTDOWN):
                raise InvalidTransitionError('Game cannot be started right now')
            generated = generate_tile_pool(self.starting_tiles, rng=self.rng)
            self.tiles = {tile.id: tile for tile in generated}
            deck = list(generated)
            self.rng.shuffle(deck)
            for player in self.players.values():
                player.hand = []
                for _ in range(self.tiles_per_player):
                    if not deck:
                        break
                    self._give(player, deck.pop())
            self.status = PLAYING
            self.start_time = utcnow()
            self.countdown_timer = None
            self.countdown = None
            logger.info(
                f"[game-start] table={self.table_id} players={len(self.players)} "
                f"tiles={len(self.tiles)} pool={len(deck)}"
            )

    def finish(self, winner: Optional[str] = None) -> None:
        with self.lock:
            if self.countdown is not None:
                self.countdown.cancel()
                self.countdown = None
            self.status = FINISHED
            self.winner = winner
            self.countdown_timer = None
            self.end_time = utcnow()
            logger.info(f"[game-finish] table={self.table_id} winner={winner}")

    def teardown(self) -> None:
        with self.lock:
            if self.status != FINISHED:
                self.finish()

    def resign(self, username: str) -> None:
        """A resignation ends the game for every player, with no winner."""
        with self.lock:
            player = self.players.get(username)
            if player is None or player.resigned:
                raise NotInGameError()
            if self.status == FINISHED:
                raise GameNotInProgressError()
            player.resigned = True
            logger.info(f"[resign] table={self.table_id} user={username}")
            self.finish()

    def remove_player(self, username: str) -> None:
        with self.lock:
            if self.status == PLAYING:
                raise InvalidTransitionError('Resign to leave a running game')
            self.players.pop(username, None)

    # ---- player actions ----

    def move_board(self, username: str, direction: str, amount: int = 1) -> Tuple[int, int]:
        with self.lock:
            player = self._acting_player(username)
            dx, dy = SCROLL_VECTORS[direction]
            step = SCROLL_STEP * amount
            x, y = player.view_position
            x = max(-VIEW_LIMIT, min(VIEW_LIMIT, x + dx * step))
            y = max(-VIEW_LIMIT, min(VIEW_LIMIT, y + dy * step))
            player.view_position = (x, y)
            return player.view_position

    def place_tile(self, username: str, tile_id: int, x: int, y: int) -> Tile:
        with self.lock:
            player = self._acting_player(username)
            if tile_id not in player.hand:
                raise TileStateError('Tile not found in hand')
            tile = self.tiles.get(tile_id)
            if tile is None or tile.state != HAND or tile.owner != username:
                raise TileStateError('Invalid tile state for placement')
            self._check_destination(username, x, y)
            player.hand.remove(tile_id)
            tile.to_board(x, y)
            logger.info(f"[place] table={self.table_id} user={username} tile={tile_id}({tile.letter}) at={x},{y}")
            return tile

    def return_tile_to_hand(self, username: str, tile_id: int) -> Tile:
        with self.lock:
            player = self._acting_player(username)
            tile = self.tiles.get(tile_id)
            if tile is None or tile.state != BOARD or tile.owner != username:
                raise TileStateError('Invalid tile for return to hand')
            self._give(player, tile)
            logger.info(f"[return] table={self.table_id} user={username} tile={tile_id}({tile.letter})")
            return tile

    def move_tile_on_board(self, username: str, tile_id: int, from_x: int, from_y: int,
                           to_x: int, to_y: int) -> Tile:
        with self.lock:
            self._acting_player(username)
            tile = self.tiles.get(tile_id)
            if tile is None or tile.state != BOARD or tile.owner != username:
                raise TileStateError('Invalid tile for board movement')
            if tile.position != (from_x, from_y):
                raise PositionMismatchError()
            if (to_x, to_y) != (from_x, from_y):
                self._check_destination(username, to_x, to_y)
            tile.to_board(to_x, to_y)
            logger.info(
                f"[move] table={self.table_id} user={username} tile={tile_id}({tile.letter}) "
                f"from={from_x},{from_y} to={to_x},{to_y}"
            )
            return tile

    def trash_tile(self, username: str, tile_id: int) -> Tuple[Tile, List[Tile]]:
        """Return a hand tile to the pool in exchange for three random pool tiles.

        The replacements are drawn from the pool as it was before the trashed
        tile went back, so a player never gets their own tile straight back.
        """
        with self.lock:
            player = self._acting_player(username)
            if tile_id not in player.hand:
                raise TileStateError('Tile not found in hand')
            pool = self.pool_tiles()
            if len(pool) < TRASH_EXCHANGE_COUNT:
                raise PoolExhaustedError()
            trashed = self.tiles.get(tile_id)
            if trashed is None or trashed.state != HAND or trashed.owner != username:
                raise TileStateError('Invalid tile state for trashing')

            player.hand.remove(tile_id)
            trashed.to_pool()
            drawn = self.rng.sample(pool, TRASH_EXCHANGE_COUNT)
            for tile in drawn:
                self._give(player, tile)
            player.tiles_trash_count += 1
            logger.info(
                f"[trash] table={self.table_id} user={username} tile={tile_id}({trashed.letter}) "
                f"drew={''.join(t.letter for t in drawn)}"
            )
            return trashed, drawn

    def submit_board(self, username: str, placements: List[Placement]) -> SubmissionResult:
        with self.lock:
            player = self._acting_player(username)
            if not placements:
                raise EmptySubmissionError()
            self._check_submitted_tiles(username, placements)

            connected = check_connected(placements)
            words: List[Word] = []
            invalid: List[Word] = []
            if connected:
                words = extract_words(placements)
                invalid = [w for w in words if not self.dictionary.is_valid_word(w.word)]

            result = SubmissionResult(
                valid=connected and not invalid,
                tiles_submitted=len(placements),
                words=words,
                invalid_words=invalid,
            )
            if not connected:
                result.reason = 'All tiles must be connected to each other'
            elif invalid:
                result.reason = 'Invalid words found: ' + ', '.join(w.word.upper() for w in invalid)
            logger.info(
                f"[submit] table={self.table_id} user={username} tiles={len(placements)} "
                f"valid={result.valid} words={[w.word for w in words]}"
            )
            if not result.valid:
                return result

            player.valid_submissions += 1
            player.last_valid_board = list(placements)

            if not player.hand and not self.pool_tiles():
                result.winner = username
                self.finish(winner=username)
                return result

            result.dealt = self._deal_one_each()
            return result

    def _check_submitted_tiles(self, username: str, placements: List[Placement]) -> None:
        # Placements that name a tile must match that tile on the player's own board
        for p in placements:
            if p.tile_id is None:
                continue
            tile = self.tiles.get(p.tile_id)
            if (tile is None or tile.state != BOARD or tile.owner != username
                    or tile.position != (p.col, p.row) or tile.letter != p.letter):
                raise TileStateError('Submitted tile is not on your board')

    def _deal_one_each(self) -> Dict[str, int]:
        pool = self.pool_tiles()
        dealt = {}
        for player in self.players.values():
            if player.resigned or not pool:
                continue
            tile = pool.pop(self.rng.randrange(len(pool)))
            self._give(player, tile)
            dealt[player.username] = tile.id
        logger.debug(f"[deal] table={self.table_id} dealt={dealt} pool={len(pool)}")
        return dealt

    # ---- reporting ----

    def final_stats(self) -> List[dict]:
        with self.lock:
            stats = []
            for player in self.players.values():
                on_board = sum(1 for t in self.tiles.values() if t.state == BOARD and t.owner == player.username)
                score = score_board(player.last_valid_board, self.dictionary)
                breakdown = score.to_dict()
                stats.append({
                    'username': player.username,
                    'isWinner': player.username == self.winner,
                    'tilesOnBoard': on_board,
                    'tilesInHand': len(player.hand),
                    'tilesTrashCount': player.tiles_trash_count,
                    'validSubmissions': player.valid_submissions,
                    'score': breakdown.pop('totalScore'),
                    'scoreBreakdown': breakdown,
                })
            return stats

    def to_dict(self):
        with self.lock:
            return {
                'tableId': self.table_id,
                'status': self.status,
                'countdownTimer': self.countdown_timer,
                'startTime': self.start_time.isoformat() if self.start_time else None,
                'winner': self.winner,
                'players': [p.to_dict(self.tiles) for p in self.players.values()],
                'allTiles': {str(tile_id): tile.to_dict() for tile_id, tile in self.tiles.items()},
                'poolCount': len(self.pool_tiles()),
            }
