import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name, default='0'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '127.0.0.1')
    PORT = int(os.environ.get('PORT', '3000'))
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000').split(',')
        if origin.strip()
    ]
    # Word list loaded once at startup; a missing file aborts startup
    DICTIONARY_PATH = os.environ.get('DICTIONARY_PATH') or os.path.join(BASE_DIR, 'speedwurdz', 'data', 'words.txt')
    # Lobby limits
    MAX_USERS = int(os.environ.get('MAX_USERS', '50'))
    DEFAULT_MAX_PLAYERS = int(os.environ.get('DEFAULT_MAX_PLAYERS', '4'))
    # Tile pool sizing: startingTiles defaults to max(MIN_STARTING_TILES, maxPlayers * TILES_PER_SEAT)
    MIN_STARTING_TILES = int(os.environ.get('MIN_STARTING_TILES', '75'))
    TILES_PER_SEAT = int(os.environ.get('TILES_PER_SEAT', '25'))
    TILES_PER_PLAYER = int(os.environ.get('TILES_PER_PLAYER', '10'))
    # Countdown before play (ticks, and seconds per tick)
    COUNTDOWN_SECONDS = int(os.environ.get('COUNTDOWN_SECONDS', '3'))
    COUNTDOWN_TICK_SEC = float(os.environ.get('COUNTDOWN_TICK_SEC', '1.0'))
    # Reject place/move onto an occupied cell of the player's own board
    ENFORCE_BOARD_OCCUPANCY = _env_flag('ENFORCE_BOARD_OCCUPANCY')
