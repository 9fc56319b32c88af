import pytest
from conftest import placements, word_across

from speedwurdz.services.games.board import extract_words
from speedwurdz.services.games.scoring import length_bonus, score_board, score_words


def test_cat_scores_five():
    cells = word_across('CAT')
    score = score_words(cells, extract_words(cells))
    assert (score.tile_score, score.length_bonus, score.total_score) == (5, 0, 5)
    assert score.valid_word_count == 1


def test_house_scores_thirteen():
    cells = word_across('HOUSE')
    score = score_words(cells, extract_words(cells))
    assert (score.tile_score, score.length_bonus, score.total_score) == (8, 5, 13)
    assert score.word_scores[0].to_dict() == {
        'word': 'house',
        'length': 5,
        'tileScore': 8,
        'lengthBonus': 5,
        'totalScore': 13,
    }


@pytest.mark.parametrize('length,bonus', [(2, 0), (4, 0), (5, 5), (6, 10), (9, 25)])
def test_length_bonus(length, bonus):
    assert length_bonus(length) == bonus


def test_shared_tile_counted_once():
    cells = word_across('CAT') + placements(('A', 1, 0), ('R', 2, 0))
    score = score_words(cells, extract_words(cells))
    # CAT = 3+1+1; CAR adds only A and R since C was already counted
    assert [w.tile_score for w in score.word_scores] == [5, 2]
    assert score.total_score == 7


def test_score_board_ignores_invalid_words(dictionary):
    cells = word_across('CAT') + word_across('ZQ', row=4)
    score = score_board(cells, dictionary)
    assert [w.word for w in score.word_scores] == ['cat']
    assert score.to_dict()['totalScore'] == 5


def test_score_board_empty(dictionary):
    assert score_board([], dictionary).to_dict() == {
        'tileScore': 0,
        'lengthBonus': 0,
        'totalScore': 0,
        'validWordCount': 0,
        'wordScores': [],
    }
