import math
from typing import Dict, List

from yoink.models import Room, Settings
from .pool import LETTER_POINTS


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def base_score(word: str) -> int:
    """Letter points times a length bonus of 5% per letter."""
    points = sum(LETTER_POINTS.get(ch, 0) for ch in word)
    return round_half_up(points * (1 + 0.05 * len(word)))


def decay_factor(count: int, model: str) -> float:
    if model == 'linear':
        return 1 / count
    if model == 'soft':
        return 1 / (1 + 0.6 * (count - 1))
    if model == 'steep':
        return 1 / math.pow(count, 1.3)
    raise ValueError(f"unknown decay model: {model}")


def final_score(word: str, base: int, usage_count: int, settings: Settings) -> int:
    """Apply duplicate decay to one claimed word.

    Under ``disallow`` duplicates were rejected at arbitration and under
    ``allow_no_penalty`` they are free, so only ``allow_with_decay`` with
    a word accepted more than once this round loses points.
    """
    if settings.unique_words != 'allow_with_decay':
        return base
    if usage_count <= 1:
        return base
    return round_half_up(base * decay_factor(usage_count, settings.decay_model))


def build_leaderboard(room: Room) -> List[Dict]:
    """Final decayed scores for every seated player, best first."""
    leaderboard = []
    for player in room.players.values():
        total = 0
        details = []
        for claimed in player.words:
            count = room.word_counts.get(claimed.word, 1)
            adjusted = final_score(claimed.word, claimed.base, count, room.settings)
            total += adjusted
            details.append({
                'word': claimed.word,
                'base': claimed.base,
                'count': count,
                'final': adjusted,
            })
        leaderboard.append({
            'id': player.id,
            'name': player.name,
            'finalScore': total,
            'details': details,
        })
    leaderboard.sort(key=lambda entry: entry['finalScore'], reverse=True)
    return leaderboard
