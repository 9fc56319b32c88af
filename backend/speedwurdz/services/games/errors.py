class GameError(Exception):
    """A rejected game action. The message is shown to the acting player only."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotInGameError(GameError):
    def __init__(self, message: str = 'You are not in this game'):
        super().__init__(message)


class GameNotInProgressError(GameError):
    def __init__(self, message: str = 'Game is not in progress'):
        super().__init__(message)


class InvalidTransitionError(GameError):
    pass


class TileStateError(GameError):
    pass


class PositionMismatchError(GameError):
    def __init__(self, message: str = 'Tile position mismatch'):
        super().__init__(message)


class PoolExhaustedError(GameError):
    def __init__(self, message: str = 'Not enough tiles in pool to exchange'):
        super().__init__(message)


class EmptySubmissionError(GameError):
    def __init__(self, message: str = 'No tiles to submit'):
        super().__init__(message)
