import logging
import time
from typing import Callable, List, Optional

from yoink.models import Acceptance, Room
from . import pool as pool_ops
from .arbiter import SubmissionArbiter, window_key
from .scoring import build_leaderboard, round_half_up

logger = logging.getLogger(__name__)


class RoundScheduler:
    """Drive a room's round: reveal tiles, flush windows, finish on time.

    Each step is a plain method so it can be called directly; :meth:`tick`
    strings them together and the background driver calls :meth:`tick`
    once per ``settings.tick_sec``.
    """

    def __init__(self, arbiter: SubmissionArbiter, broadcaster,
                 start_task: Optional[Callable] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.time,
                 heartbeat_sec: int = 0):
        self.arbiter = arbiter
        self.broadcaster = broadcaster
        # None disables the background driver (tests tick by hand)
        self.start_task = start_task
        self.sleep = sleep
        self.clock = clock
        self.heartbeat_sec = heartbeat_sec

    # ---- round lifecycle ----

    def start_round(self, room: Room, now: Optional[float] = None) -> None:
        now = self.clock() if now is None else now
        settings = room.settings
        room.pool = {}
        room.bag = pool_ops.generate_bag()
        room.revealed = 0
        room.word_counts.clear()
        room.pending.clear()
        room.resolved_through = None
        room.surge_fired = False
        room.last_results = None
        for player in room.players.values():
            player.reset()
        room.started = True
        room.started_at = now
        room.end_at = now + settings.duration_sec

        opening = min(settings.opening_tiles, settings.round_tiles)
        room.revealed = pool_ops.reveal(room.pool, room.bag, 0, opening)
        logger.info(
            f"[round-start] room={room.id} players={len(room.players)} opening={room.revealed} deadline={room.end_at}"
        )
        generation = self.stop_driver(room)
        if self.start_task is not None:
            self.start_task(self._drive, room, generation)

    def stop_driver(self, room: Room) -> int:
        """Invalidate any running driver; returns the new generation."""
        room.driver_generation += 1
        return room.driver_generation

    def finalize(self, room: Room) -> list:
        leaderboard = build_leaderboard(room)
        room.last_results = leaderboard
        logger.info(f"[round-end] room={room.id} players={len(leaderboard)} words={sum(room.word_counts.values())}")
        self.broadcaster.ended(room, leaderboard)
        self.broadcaster.state(room)
        return leaderboard

    # ---- tick steps ----

    def reveal_drip(self, room: Room) -> int:
        settings = room.settings
        take = min(settings.drip_per_sec, settings.round_tiles - room.revealed)
        added = pool_ops.reveal(room.pool, room.bag, room.revealed, take)
        room.revealed += added
        return added

    def trigger_surge(self, room: Room, now: float) -> int:
        settings = room.settings
        if room.surge_fired or room.started_at is None:
            return 0
        elapsed = round_half_up(now - room.started_at)
        if elapsed < settings.surge_at_sec:
            return 0
        room.surge_fired = True
        take = min(settings.surge_amount, settings.round_tiles - room.revealed)
        added = pool_ops.reveal(room.pool, room.bag, room.revealed, take)
        room.revealed += added
        logger.info(f"[surge] room={room.id} elapsed={elapsed}s added={added}")
        return added

    def flush_window(self, room: Room, now: float) -> List[Acceptance]:
        """Resolve every window that closed at least one window-width ago.

        Ticks are coarser than windows, so several windows close between
        ticks; they are resolved oldest first.
        """
        window_ms = room.settings.window_ms
        closed = window_key(int(now * 1000) - window_ms, window_ms)
        results: List[Acceptance] = []
        for key in sorted(k for k in room.pending if k <= closed):
            results.extend(self.arbiter.resolve(room, key))
        if room.resolved_through is None or closed > room.resolved_through:
            room.resolved_through = closed
        return results

    def tick(self, room: Room, now: Optional[float] = None) -> bool:
        """Run one scheduler step; returns False once the round has ended."""
        now = self.clock() if now is None else now
        if not room.started:
            return False
        if room.end_at is not None and now >= room.end_at:
            room.started = False
            self.stop_driver(room)
            self.finalize(room)
            return False

        self.reveal_drip(room)
        self.trigger_surge(room, now)
        self.broadcaster.state(room)
        for acceptance in self.flush_window(room, now):
            self.broadcaster.accepted(room, acceptance)
        return True

    # ---- background driver ----

    def _drive(self, room: Room, generation: int) -> None:
        interval = room.settings.tick_sec
        ticks = 0
        while True:
            self.sleep(interval)
            ticks += 1
            with room.lock:
                if room.driver_generation != generation:
                    logger.info(f"[timer-abort] room={room.id} generation={generation} superseded")
                    return
                if self.heartbeat_sec and (ticks * interval) % self.heartbeat_sec < interval:
                    logger.info(f"[timer-heartbeat] room={room.id} remaining={room.ends_in_ms(self.clock())}ms")
                if not self.tick(room):
                    return
