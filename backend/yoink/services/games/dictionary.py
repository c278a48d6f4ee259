"""Word list loading.

The game only ever asks one question of the dictionary: is this uppercase
token a word. Lists are read once at startup; a source that cannot be read
is fatal.
"""

import logging
import os
import re
from typing import Iterable, List, Set, Union

import requests

logger = logging.getLogger(__name__)

_LETTERS_ONLY = re.compile(r'^[A-Za-z]+$')

BUNDLED_WORDS = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), 'data', 'words.txt')

FETCH_TIMEOUT_SEC = 15


class DictionaryLoadError(RuntimeError):
    """A word list source could not be read."""


class WordDictionary:
    def __init__(self, words: Iterable[str] = ()):
        self._words: Set[str] = set()
        self.add_lines(words)

    def add_lines(self, lines: Iterable[str]) -> None:
        for raw in lines:
            word = raw.strip()
            if len(word) < 2 or not _LETTERS_ONLY.match(word):
                continue
            self._words.add(word.upper())

    def __contains__(self, word) -> bool:
        return word in self._words

    def __len__(self) -> int:
        return len(self._words)


def parse_sources(value: Union[str, List[str], None]) -> List[str]:
    if not value:
        return [BUNDLED_WORDS]
    if isinstance(value, str):
        value = value.split(',')
    sources = [s.strip() for s in value if s and s.strip()]
    return sources or [BUNDLED_WORDS]


def _read_source(source: str) -> str:
    if source.startswith(('http://', 'https://')):
        try:
            response = requests.get(source, timeout=FETCH_TIMEOUT_SEC)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DictionaryLoadError(f"failed to fetch word list {source}: {exc}") from exc
        return response.text
    try:
        with open(source, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as exc:
        raise DictionaryLoadError(f"failed to read word list {source}: {exc}") from exc


def load_words(sources: Union[str, List[str], None]) -> WordDictionary:
    """Build a dictionary from every source; raises DictionaryLoadError on the first failure."""
    dictionary = WordDictionary()
    for source in parse_sources(sources):
        before = len(dictionary)
        dictionary.add_lines(_read_source(source).splitlines())
        logger.info(f"[dictionary] source={source} added={len(dictionary) - before}")
    logger.info(f"[dictionary] loaded {len(dictionary)} words")
    return dictionary
