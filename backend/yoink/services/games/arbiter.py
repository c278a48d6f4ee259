import logging
import re
from typing import List, Optional

from yoink.models import Acceptance, ClaimedWord, Room, Submission
from . import pool as pool_ops
from .scoring import base_score

logger = logging.getLogger(__name__)

_WORD_FORMAT = re.compile(r'[A-Z]+')


def window_key(ts_ms: int, window_ms: int) -> int:
    return ts_ms // window_ms


class SubmissionArbiter:
    """Batch claims into fixed-width time windows and resolve each window at once.

    Handlers only call :meth:`enqueue`. The scheduler calls :meth:`resolve`
    for a window once no submission can still land in it, so the pool is
    only ever mutated from the tick.
    """

    def __init__(self, dictionary):
        self.dictionary = dictionary

    def enqueue(self, room: Room, submission: Submission) -> Optional[int]:
        """File a claim under its window; returns None if that window already closed."""
        key = window_key(submission.ts, room.settings.window_ms)
        if room.resolved_through is not None and key <= room.resolved_through:
            logger.debug(f"[reject] room={room.id} player={submission.player_id} reason=late")
            return None
        room.pending.setdefault(key, []).append(submission)
        return key

    def _rejection(self, room: Room, sub: Submission, claimed_now: set) -> str:
        word = sub.word
        if not _WORD_FORMAT.fullmatch(word):
            return 'format'
        if len(word) < room.settings.min_len:
            return 'too-short'
        if word not in self.dictionary:
            return 'not-a-word'
        if room.settings.unique_words == 'disallow':
            player = room.players.get(sub.player_id)
            if player.has_claimed(word) or (sub.player_id, word) in claimed_now:
                return 'duplicate'
        return ''

    def resolve(self, room: Room, key: int) -> List[Acceptance]:
        """Resolve one closed window against a snapshot of the pool.

        Earliest timestamp wins contested letters; ties keep arrival order.
        Rejections are silent.
        """
        subs = room.pending.pop(key, None)
        if not subs:
            return []

        snapshot = pool_ops.snapshot(room.pool)
        accepted: List[Submission] = []
        claimed_now = set()
        for sub in sorted(subs, key=lambda s: (s.ts, s.seq)):
            if sub.player_id not in room.players:
                logger.debug(f"[reject] room={room.id} player={sub.player_id} reason=gone")
                continue
            reason = self._rejection(room, sub, claimed_now)
            if not reason and not pool_ops.can_satisfy(sub.word, snapshot):
                reason = 'pool'
            if reason:
                logger.debug(f"[reject] room={room.id} player={sub.player_id} reason={reason}")
                continue
            pool_ops.consume(sub.word, snapshot)
            claimed_now.add((sub.player_id, sub.word))
            accepted.append(sub)

        results: List[Acceptance] = []
        for sub in accepted:
            player = room.players[sub.player_id]
            points = base_score(sub.word)
            # Snapshot started equal to the live pool, so this cannot fail
            pool_ops.consume(sub.word, room.pool)
            player.live_score += points
            player.words.append(ClaimedWord(sub.word, points))
            room.word_counts[sub.word] = room.word_counts.get(sub.word, 0) + 1
            results.append(Acceptance(player_id=player.id, name=player.name, word=sub.word, points=points))

        logger.info(
            f"[window-resolve] room={room.id} window={key} submitted={len(subs)} accepted={len(results)}"
        )
        return results
