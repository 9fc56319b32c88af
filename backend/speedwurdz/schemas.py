from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

Direction = Literal['up', 'down', 'left', 'right']

ACTION_TAGS = (
    'move-board',
    'place-tile',
    'return-tile-to-hand',
    'move-tile-on-board',
    'submit-board',
    'trash-tile',
)


class WireModel(BaseModel):
    # Clients send camelCase; Python code uses snake_case
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class Placement(WireModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore', frozen=True)

    tile_id: Optional[int] = Field(default=None, alias='tileId')
    letter: str
    row: int
    col: int

    @field_validator('letter')
    @classmethod
    def _upper_letter(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) != 1 or not 'A' <= value <= 'Z':
            raise ValueError('letter must be a single character A-Z')
        return value


class MoveBoard(WireModel):
    action: Literal['move-board']
    direction: Direction
    amount: int = Field(default=1, ge=1)


class PlaceTile(WireModel):
    action: Literal['place-tile']
    tile_id: int = Field(alias='tileId')
    x: int
    y: int


class ReturnTileToHand(WireModel):
    action: Literal['return-tile-to-hand']
    tile_id: int = Field(alias='tileId')
    x: Optional[int] = None
    y: Optional[int] = None


class MoveTileOnBoard(WireModel):
    action: Literal['move-tile-on-board']
    tile_id: int = Field(alias='tileId')
    from_x: int = Field(alias='fromX')
    from_y: int = Field(alias='fromY')
    to_x: int = Field(alias='toX')
    to_y: int = Field(alias='toY')


class SubmitBoard(WireModel):
    action: Literal['submit-board']
    board_data: List[Placement] = Field(default_factory=list, alias='boardData')


class TrashTile(WireModel):
    action: Literal['trash-tile']
    tile_id: int = Field(alias='tileId')


GameAction = Annotated[
    Union[MoveBoard, PlaceTile, ReturnTileToHand, MoveTileOnBoard, SubmitBoard, TrashTile],
    Field(discriminator='action'),
]

game_action_adapter = TypeAdapter(GameAction)


def parse_game_action(payload: dict):
    """Validate a raw ``game-action`` payload into one of the action models."""
    return game_action_adapter.validate_python(payload)


class CreateTable(WireModel):
    name: Optional[str] = None
    max_players: Optional[int] = Field(default=None, alias='maxPlayers', ge=1)
    starting_tiles: Optional[int] = Field(default=None, alias='startingTiles', ge=1)
