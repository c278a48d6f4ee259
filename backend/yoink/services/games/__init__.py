"""Game domain services: tile pool, arbitration, scoring and round timing.

This package contains the room engine that socket handlers and HTTP
routes call into, keeping transport concerns separated from core game
mechanics. Nothing here imports Flask.
"""

from .arbiter import SubmissionArbiter, window_key
from .dictionary import DictionaryLoadError, WordDictionary, load_words
from .ratelimit import RateLimiter
from .rooms import RoomRegistry
from .scheduler import RoundScheduler

__all__ = [
    'DictionaryLoadError',
    'RateLimiter',
    'RoomRegistry',
    'RoundScheduler',
    'SubmissionArbiter',
    'WordDictionary',
    'load_words',
    'window_key',
]
