import itertools
import logging
import threading
import time
import uuid
from typing import Callable, Dict, List, Optional, Tuple

from yoink.models import Player, Room, Settings, Submission, clean_name
from .ratelimit import RateLimiter
from .scheduler import RoundScheduler

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Every live room, keyed by id, plus which connection sits where.

    Player ids are session ids issued here at join time; the transport's
    connection handle is only used to find the seat again.
    """

    def __init__(self, scheduler: RoundScheduler, limiter: RateLimiter,
                 default_settings: Optional[Settings] = None,
                 idle_grace_sec: int = 0,
                 clock: Callable[[], float] = time.time):
        self.scheduler = scheduler
        self.limiter = limiter
        self.default_settings = default_settings or Settings()
        self.idle_grace_sec = idle_grace_sec
        self.clock = clock
        self._rooms: Dict[str, Room] = {}
        self._seats: Dict[str, Tuple[str, str]] = {}  # connection id -> (room id, player id)
        self._seq = itertools.count()
        self._lock = threading.RLock()

    @property
    def broadcaster(self):
        return self.scheduler.broadcaster

    def ensure_room(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = Room(id=room_id, settings=self.default_settings)
                self._rooms[room_id] = room
                logger.info(f"[room-create] room={room_id}")
            return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def room_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._rooms)

    def seat_of(self, connection_id: str) -> Optional[Tuple[str, str]]:
        return self._seats.get(connection_id)

    def join(self, room_id: str, connection_id: str, name: Optional[str]) -> Player:
        with self._lock:
            if connection_id in self._seats:
                self.leave(connection_id, forget_limit=False)
            room = self.ensure_room(room_id)
            player = Player(id=uuid.uuid4().hex, name=clean_name(name), connection_id=connection_id)
            with room.lock:
                room.players[player.id] = player
                room.empty_since = None
                self._seats[connection_id] = (room_id, player.id)
                if not room.started:
                    self.scheduler.start_round(room)
                self.broadcaster.state(room)
            logger.info(f"[join] room={room_id} player={player.id} name={player.name}")
            return player

    def submit(self, connection_id: str, word, ts: Optional[int] = None) -> bool:
        """Queue a claim for arbitration. Every refusal is silent."""
        seat = self._seats.get(connection_id)
        if not seat:
            return False
        room = self._rooms.get(seat[0])
        if room is None or not room.started:
            return False
        if not self.limiter.allow(connection_id):
            logger.debug(f"[reject] room={room.id} player={seat[1]} reason=rate-limit")
            return False
        ts = int(self.clock() * 1000) if ts is None else ts
        submission = Submission(
            ts=ts,
            seq=next(self._seq),
            connection_id=connection_id,
            player_id=seat[1],
            word=str(word or '').strip().upper(),
        )
        with room.lock:
            return self.scheduler.arbiter.enqueue(room, submission) is not None

    def leave(self, connection_id: str, forget_limit: bool = True) -> Optional[Room]:
        """Unseat a connection. The limiter bucket survives a seat move so
        re-joining cannot refill it."""
        with self._lock:
            seat = self._seats.pop(connection_id, None)
            if forget_limit:
                self.limiter.forget(connection_id)
            if not seat:
                return None
            room = self._rooms.get(seat[0])
            if room is None:
                return None
            with room.lock:
                room.players.pop(seat[1], None)
                if not room.players:
                    room.empty_since = self.clock()
                self.broadcaster.state(room)
            logger.info(f"[leave] room={room.id} player={seat[1]}")
            return room

    def sweep_idle(self, now: Optional[float] = None) -> List[str]:
        """Destroy rooms that have been empty for longer than the grace period."""
        if self.idle_grace_sec <= 0:
            return []
        now = self.clock() if now is None else now
        removed = []
        with self._lock:
            for room_id, room in list(self._rooms.items()):
                with room.lock:
                    if room.players or room.empty_since is None:
                        continue
                    if now - room.empty_since < self.idle_grace_sec:
                        continue
                    room.started = False
                    self.scheduler.stop_driver(room)
                    del self._rooms[room_id]
                    removed.append(room_id)
        if removed:
            logger.info(f"[room-sweep] removed={removed}")
        return removed

    def run_sweeper(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Background loop calling :meth:`sweep_idle` twice per grace period."""
        interval = max(1.0, self.idle_grace_sec / 2)
        while self.idle_grace_sec > 0:
            sleep(interval)
            self.sweep_idle()
