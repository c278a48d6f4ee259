"""Shared tile pool: frequency tables, bag generation and word feasibility.

The pool is a plain ``{letter: count}`` mapping. Nothing here performs I/O;
the scheduler and arbiter own when these functions run.
"""

import random
from collections import Counter
from typing import Dict, List, Optional

WILDCARD = '_'

TILE_COUNTS: Dict[str, int] = {
    WILDCARD: 4,
    'E': 24, 'A': 16, 'O': 15, 'T': 15, 'I': 13, 'N': 13, 'R': 13, 'S': 10, 'L': 7, 'U': 7,
    'D': 8, 'G': 5,
    'C': 6, 'M': 6, 'B': 4, 'P': 4,
    'H': 5, 'F': 4, 'W': 4, 'Y': 4, 'V': 3,
    'K': 2, 'J': 2, 'X': 2, 'Q': 2, 'Z': 2,
}

LETTER_POINTS: Dict[str, int] = {
    WILDCARD: 0,
    'E': 1, 'A': 1, 'O': 1, 'T': 1, 'I': 1, 'N': 1, 'R': 1, 'S': 1, 'L': 1, 'U': 1,
    'D': 2, 'G': 2,
    'C': 3, 'M': 3, 'B': 3, 'P': 3,
    'H': 4, 'F': 4, 'W': 4, 'Y': 4, 'V': 4,
    'K': 5,
    'J': 8, 'X': 8,
    'Q': 10, 'Z': 10,
}

BAG_SIZE = sum(TILE_COUNTS.values())


def generate_bag(rng: Optional[random.Random] = None) -> List[str]:
    """Return every tile of the distribution once, uniformly shuffled."""
    bag: List[str] = []
    for tile, count in TILE_COUNTS.items():
        bag.extend([tile] * count)
    # random.shuffle is Fisher-Yates: every permutation equally likely
    (rng or random).shuffle(bag)
    return bag


def can_satisfy(word: str, pool: Dict[str, int]) -> bool:
    """True if ``pool`` can cover ``word``, spending exact letters before wildcards."""
    shortfall = 0
    for letter, needed in Counter(word).items():
        if letter == WILDCARD:
            # A literal blank in the word can only come from the blank count
            shortfall += needed
            continue
        shortfall += max(0, needed - pool.get(letter, 0))
    return shortfall <= pool.get(WILDCARD, 0)


def consume(word: str, pool: Dict[str, int]) -> None:
    """Remove ``word``'s tiles from ``pool`` in place.

    Callers must check :func:`can_satisfy` first. A letter with no exact
    tile left is paid for with a wildcard.
    """
    for letter in word:
        if pool.get(letter, 0) > 0:
            pool[letter] -= 1
        elif pool.get(WILDCARD, 0) > 0:
            pool[WILDCARD] -= 1


def snapshot(pool: Dict[str, int]) -> Dict[str, int]:
    """Independent copy of ``pool`` for speculative deductions."""
    return dict(pool)


def reveal(pool: Dict[str, int], bag: List[str], start: int, count: int) -> int:
    """Move ``bag[start:start + count]`` into ``pool``; return tiles added."""
    if count <= 0:
        return 0
    tiles = bag[start:start + count]
    for tile in tiles:
        pool[tile] = pool.get(tile, 0) + 1
    return len(tiles)
