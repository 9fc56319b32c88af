"""Connectivity and word extraction over a submitted batch of placements.

Both functions look only at the placements they are given; tiles confirmed by
earlier submissions are not part of the check.
"""
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from speedwurdz.schemas import Placement

HORIZONTAL = 'horizontal'
VERTICAL = 'vertical'

NEIGHBOURS = ((0, 1), (0, -1), (-1, 0), (1, 0))


@dataclass(frozen=True)
class Word:
    word: str
    positions: Tuple[Tuple[int, int], ...]
    direction: str

    def to_dict(self):
        return {
            'word': self.word,
            'positions': [{'row': row, 'col': col} for row, col in self.positions],
            'direction': self.direction,
        }


def check_connected(placements: List[Placement]) -> bool:
    if len(placements) <= 1:
        return True

    occupied = {(p.col, p.row) for p in placements}
    start = (placements[0].col, placements[0].row)
    visited = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in NEIGHBOURS:
            nxt = (x + dx, y + dy)
            if nxt in occupied and nxt not in visited:
                visited.add(nxt)
                queue.append(nxt)
    # Two placements on one cell can never all be reached
    return len(visited) == len(placements)


def _runs(cells: Iterable[Tuple[Tuple[int, int], str]], direction: str) -> List[Word]:
    words = []
    letters: List[str] = []
    positions: List[Tuple[int, int]] = []
    # A None letter closes the current run
    for pos, letter in cells:
        if letter:
            letters.append(letter)
            positions.append(pos)
            continue
        if len(letters) >= 2:
            words.append(Word(''.join(letters).lower(), tuple(positions), direction))
        letters, positions = [], []
    return words


def extract_words(placements: List[Placement]) -> List[Word]:
    """Every horizontal and vertical run of two or more letters.

    Horizontal words come first, ordered by row then column, followed by
    vertical words ordered by column then row.
    """
    if not placements:
        return []

    grid: Dict[Tuple[int, int], str] = {(p.row, p.col): p.letter for p in placements}
    rows = [row for row, _ in grid]
    cols = [col for _, col in grid]
    min_row, max_row = min(rows), max(rows)
    min_col, max_col = min(cols), max(cols)

    words = []
    for row in range(min_row, max_row + 1):
        cells = (((row, col), grid.get((row, col))) for col in range(min_col, max_col + 2))
        words.extend(_runs(cells, HORIZONTAL))
    for col in range(min_col, max_col + 1):
        cells = (((row, col), grid.get((row, col))) for row in range(min_row, max_row + 2))
        words.extend(_runs(cells, VERTICAL))
    return words
