import logging
from dataclasses import dataclass, field
from typing import List

from speedwurdz.schemas import Placement
from .board import Word, extract_words

logger = logging.getLogger(__name__)

TILE_VALUES = {
    'A': 1, 'B': 3, 'C': 3, 'D': 2, 'E': 1, 'F': 4, 'G': 2, 'H': 4, 'I': 1,
    'J': 8, 'K': 5, 'L': 1, 'M': 3, 'N': 1, 'O': 1, 'P': 3, 'Q': 10, 'R': 1,
    'S': 1, 'T': 1, 'U': 1, 'V': 4, 'W': 4, 'X': 8, 'Y': 4, 'Z': 10,
}

BONUS_FREE_LENGTH = 4
BONUS_PER_EXTRA_LETTER = 5


@dataclass
class WordScore:
    word: str
    length: int
    tile_score: int
    length_bonus: int

    @property
    def total_score(self) -> int:
        return self.tile_score + self.length_bonus

    def to_dict(self):
        return {
            'word': self.word,
            'length': self.length,
            'tileScore': self.tile_score,
            'lengthBonus': self.length_bonus,
            'totalScore': self.total_score,
        }


@dataclass
class BoardScore:
    tile_score: int = 0
    length_bonus: int = 0
    word_scores: List[WordScore] = field(default_factory=list)

    @property
    def total_score(self) -> int:
        return self.tile_score + self.length_bonus

    @property
    def valid_word_count(self) -> int:
        return len(self.word_scores)

    def to_dict(self):
        return {
            'tileScore': self.tile_score,
            'lengthBonus': self.length_bonus,
            'totalScore': self.total_score,
            'validWordCount': self.valid_word_count,
            'wordScores': [w.to_dict() for w in self.word_scores],
        }


def length_bonus(length: int) -> int:
    if length <= BONUS_FREE_LENGTH:
        return 0
    return (length - BONUS_FREE_LENGTH) * BONUS_PER_EXTRA_LETTER


def score_words(placements: List[Placement], valid_words: List[Word]) -> BoardScore:
    """Score already-validated words.

    A tile shared by a horizontal and a vertical word is counted for the first
    word that reaches it only; the length bonus applies to every word.
    """
    letters = {(p.row, p.col): p.letter for p in placements}
    counted = set()
    result = BoardScore()
    for word in valid_words:
        word_tiles = 0
        for pos in word.positions:
            if pos in counted or pos not in letters:
                continue
            word_tiles += TILE_VALUES.get(letters[pos], 0)
            counted.add(pos)
        entry = WordScore(word.word, len(word.word), word_tiles, length_bonus(len(word.word)))
        result.word_scores.append(entry)
        result.tile_score += entry.tile_score
        result.length_bonus += entry.length_bonus
    return result


def score_board(placements: List[Placement], dictionary) -> BoardScore:
    """Extract the words of a board, keep the ones the dictionary accepts and score them."""
    if not placements:
        return BoardScore()
    valid = [w for w in extract_words(placements) if dictionary.is_valid_word(w.word)]
    score = score_words(placements, valid)
    logger.debug(
        f"[score] words={[w.word for w in valid]} tiles={score.tile_score} "
        f"bonus={score.length_bonus} total={score.total_score}"
    )
    return score
