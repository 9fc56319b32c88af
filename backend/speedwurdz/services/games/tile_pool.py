import logging
import random
from collections import Counter
from typing import List, Sequence

from speedwurdz.models import Tile

logger = logging.getLogger(__name__)

VOWELS = ('E', 'A', 'O', 'I', 'U')
VOWEL_WEIGHTS = (29, 22, 19, 19, 10)

# Consonant tiers and the per-letter percentage of each tier
HIGH_FREQ = ('S', 'N', 'R', 'T')
MEDIUM_FREQ = ('G', 'L', 'D')
LOW_MEDIUM_FREQ = ('Y', 'P', 'F', 'H', 'B', 'C', 'M', 'V', 'W')
LOW_FREQ = ('Q', 'X', 'K', 'J', 'Z')
CONSONANT_TIERS = (
    (LOW_FREQ, 2),
    (LOW_MEDIUM_FREQ, 4),
    (MEDIUM_FREQ, 6),
    (HIGH_FREQ, 9),
)
ALL_CONSONANTS = HIGH_FREQ + MEDIUM_FREQ + LOW_MEDIUM_FREQ + LOW_FREQ

CAPPED_LETTERS = ('Q', 'Z')
CAPPED_MAX = 2
MIN_U = 2
MAX_REDRAW_ATTEMPTS = 50


def weighted_choice(items: Sequence[str], weights: Sequence[int], rng=random) -> str:
    total = sum(weights)
    remaining = rng.random() * total
    for item, weight in zip(items, weights):
        remaining -= weight
        if remaining <= 0:
            return item
    return items[-1]


def _draw_consonant(rng) -> str:
    roll = rng.random() * 100
    upper = 0
    for letters, pct in CONSONANT_TIERS:
        upper += pct * len(letters)
        if roll < upper:
            return rng.choice(letters)
    return rng.choice(HIGH_FREQ)


def generate_tile_pool(pool_size: int, rng=random) -> List[Tile]:
    """Build the tile pool for one game.

    40-45% of the pool (re-rolled per call) are vowels drawn by weight. The
    consonant share starts with one of every consonant, then fills by tier
    frequency with Q and Z capped at two each. At least two U tiles are
    guaranteed, which can push the pool up to two tiles past ``pool_size``.
    Tiles come back in generation order with ids from 1; shuffle before dealing.
    """
    vowel_count = int(pool_size * (40 + rng.random() * 5) / 100)
    consonant_count = pool_size - vowel_count
    letters: List[str] = []
    counts: Counter = Counter()

    def add(letter):
        letters.append(letter)
        counts[letter] += 1

    for _ in range(vowel_count):
        add(weighted_choice(VOWELS, VOWEL_WEIGHTS, rng))

    for consonant in ALL_CONSONANTS:
        add(consonant)

    for _ in range(consonant_count - len(ALL_CONSONANTS)):
        attempts = 0
        while True:
            consonant = _draw_consonant(rng)
            attempts += 1
            capped = consonant in CAPPED_LETTERS and counts[consonant] >= CAPPED_MAX
            if not capped or attempts >= MAX_REDRAW_ATTEMPTS:
                break
        if attempts >= MAX_REDRAW_ATTEMPTS:
            consonant = rng.choice(HIGH_FREQ)
        add(consonant)

    if counts['U'] < MIN_U:
        missing = MIN_U - counts['U']
        logger.debug(f"[pool-u-floor] adding={missing}")
        for _ in range(missing):
            add('U')

    tiles = [Tile(id=i, letter=letter) for i, letter in enumerate(letters, start=1)]
    log_breakdown(tiles, requested=pool_size)
    return tiles


def log_breakdown(tiles: List[Tile], requested: int) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    counts = Counter(t.letter for t in tiles)
    total = len(tiles) or 1
    vowels = sum(counts[v] for v in VOWELS)
    logger.debug(
        f"[pool-generated] requested={requested} total={len(tiles)} "
        f"vowels={vowels} ({vowels / total * 100:.1f}%) consonants={len(tiles) - vowels} "
        f"Q={counts['Q']} Z={counts['Z']} U={counts['U']}"
    )
    logger.debug('[pool-letters] ' + ' '.join(f"{letter}:{n}" for letter, n in counts.most_common()))
