import threading
import time
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

UNIQUE_WORDS_MODES = ('disallow', 'allow_no_penalty', 'allow_with_decay')
DECAY_MODELS = ('linear', 'soft', 'steep')

MAX_NAME_LEN = 16


@dataclass(frozen=True)
class Settings:
    duration_sec: int = 120
    min_len: int = 3
    unique_words: str = 'allow_with_decay'
    decay_model: str = 'linear'
    round_tiles: int = 100
    drip_per_sec: int = 2
    surge_at_sec: int = 60
    surge_amount: int = 10
    opening_tiles: int = 20
    window_ms: int = 150
    tick_sec: float = 1.0

    def __post_init__(self):
        if self.unique_words not in UNIQUE_WORDS_MODES:
            raise ValueError(f"unknown unique_words policy: {self.unique_words}")
        if self.decay_model not in DECAY_MODELS:
            raise ValueError(f"unknown decay model: {self.decay_model}")
        if self.window_ms <= 0:
            raise ValueError("window_ms must be positive")

    @classmethod
    def from_config(cls, config) -> 'Settings':
        """Build room defaults from a Flask config mapping."""
        return cls(
            duration_sec=int(config.get('ROUND_DURATION_SEC', 120)),
            min_len=int(config.get('MIN_WORD_LEN', 3)),
            unique_words=config.get('UNIQUE_WORDS', 'allow_with_decay'),
            decay_model=config.get('DECAY_MODEL', 'linear'),
            round_tiles=int(config.get('ROUND_TILES', 100)),
            drip_per_sec=int(config.get('DRIP_PER_SEC', 2)),
            surge_at_sec=int(config.get('SURGE_AT_SEC', 60)),
            surge_amount=int(config.get('SURGE_AMOUNT', 10)),
            opening_tiles=int(config.get('OPENING_TILES', 20)),
            window_ms=int(config.get('WINDOW_MS', 150)),
            tick_sec=float(config.get('TICK_SEC', 1.0)),
        )

    def to_dict(self):
        return asdict(self)


@dataclass
class ClaimedWord:
    word: str
    base: int


def clean_name(name: Optional[str]) -> str:
    name = (name or '').strip()[:MAX_NAME_LEN]
    return name or 'Player'


@dataclass
class Player:
    id: str
    name: str
    connection_id: str
    live_score: int = 0
    words: List[ClaimedWord] = field(default_factory=list)

    def reset(self) -> None:
        self.live_score = 0
        self.words = []

    def has_claimed(self, word: str) -> bool:
        return any(w.word == word for w in self.words)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.live_score,
        }


@dataclass
class Submission:
    ts: int  # server-observed, milliseconds
    seq: int
    connection_id: str
    player_id: str
    word: str


@dataclass
class Acceptance:
    player_id: str
    name: str
    word: str
    points: int

    @property
    def letters(self) -> int:
        return len(self.word)

    @property
    def feed(self) -> str:
        return f"{self.name} played {self.letters} letters for {self.points} points."

    def to_dict(self):
        # The word itself stays private; the feed only reveals its length
        return {
            'playerId': self.player_id,
            'name': self.name,
            'letters': self.letters,
            'points': self.points,
            'feed': self.feed,
        }


@dataclass
class Room:
    id: str
    settings: Settings
    players: Dict[str, Player] = field(default_factory=dict)
    pool: Dict[str, int] = field(default_factory=dict)
    bag: List[str] = field(default_factory=list)
    revealed: int = 0
    started: bool = False
    started_at: Optional[float] = None
    end_at: Optional[float] = None
    surge_fired: bool = False
    pending: Dict[int, List[Submission]] = field(default_factory=dict)
    word_counts: Dict[str, int] = field(default_factory=dict)
    last_results: Optional[list] = None
    empty_since: Optional[float] = None
    # Highest window key already flushed; claims stamped into it are dropped
    resolved_through: Optional[int] = None
    # Bumped on every round start; a driver whose generation is stale exits
    driver_generation: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def ends_in_ms(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        end_at = self.end_at if self.end_at is not None else now
        return max(0, int(round((end_at - now) * 1000)))

    def to_dict(self, now: Optional[float] = None):
        return {
            'id': self.id,
            'settings': self.settings.to_dict(),
            'players': [p.to_dict() for p in self.players.values()],
            'pool': dict(self.pool),
            'endsInMs': self.ends_in_ms(now),
            'revealed': self.revealed,
            'roundTiles': self.settings.round_tiles,
            'started': self.started,
        }
