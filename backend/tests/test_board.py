from conftest import placements, word_across

from speedwurdz.services.games.board import HORIZONTAL, VERTICAL, check_connected, extract_words


def test_connected_trivial_cases():
    assert check_connected([])
    assert check_connected(placements(('A', 0, 0)))


def test_gap_is_not_connected():
    assert not check_connected(placements(('A', 0, 0), ('T', 0, 2)))


def test_l_shape_is_connected():
    assert check_connected(placements(('C', 0, 0), ('A', 0, 1), ('T', 1, 1)))


def test_diagonal_is_not_connected():
    assert not check_connected(placements(('A', 0, 0), ('B', 1, 1)))


def test_two_islands_are_not_connected():
    cells = word_across('CAT', row=0) + word_across('TEA', row=5)
    assert not check_connected(cells)


def test_duplicate_cell_is_not_connected():
    assert not check_connected(placements(('A', 0, 0), ('B', 0, 0)))


def test_negative_coordinates():
    assert check_connected(placements(('A', -3, -1), ('T', -3, 0)))
    words = extract_words(placements(('A', -3, -1), ('T', -3, 0)))
    assert [w.word for w in words] == ['at']


def test_cat_and_car_share_the_c():
    cells = word_across('CAT') + placements(('A', 1, 0), ('R', 2, 0))
    words = extract_words(cells)
    assert [(w.word, w.direction) for w in words] == [('cat', HORIZONTAL), ('car', VERTICAL)]
    assert words[0].positions == ((0, 0), (0, 1), (0, 2))
    assert words[1].positions == ((0, 0), (1, 0), (2, 0))


def test_single_letters_are_never_words():
    assert extract_words(placements(('A', 0, 0))) == []
    assert extract_words(placements(('A', 0, 0), ('B', 2, 2))) == []


def test_gap_splits_a_row():
    cells = placements(('A', 0, 0), ('T', 0, 1), ('T', 0, 3), ('E', 0, 4), ('A', 0, 5))
    assert [w.word for w in extract_words(cells)] == ['at', 'tea']


def test_output_order_rows_then_columns():
    # Two horizontal words on rows 2 and 0, one vertical word on column 4
    cells = (
        word_across('TEA', row=2, col=0)
        + word_across('AT', row=0, col=0)
        + placements(('C', 0, 4), ('A', 1, 4))
    )
    words = extract_words(cells)
    assert [(w.word, w.direction) for w in words] == [
        ('at', HORIZONTAL),
        ('tea', HORIZONTAL),
        ('ca', VERTICAL),
    ]


def test_word_to_dict():
    word = extract_words(word_across('AT'))[0]
    assert word.to_dict() == {
        'word': 'at',
        'positions': [{'row': 0, 'col': 0}, {'row': 0, 'col': 1}],
        'direction': 'horizontal',
    }
