import pytest

from yoink.models import Player, Room, Settings, Submission
from yoink.services.games import window_key
from yoink.services.games.pool import WILDCARD


def _room(settings, pool, *names):
    room = Room(id='r1', settings=settings, pool=dict(pool), started=True)
    for name in names:
        pid = name.lower()
        room.players[pid] = Player(id=pid, name=name, connection_id=f'sid-{pid}')
    return room


def _sub(ts, player, word, seq=0):
    return Submission(ts=ts, seq=seq, connection_id=f'sid-{player}', player_id=player, word=word)


def test_window_key_buckets_by_width():
    assert window_key(0, 150) == 0
    assert window_key(149, 150) == 0
    assert window_key(150, 150) == 1
    assert window_key(100, 150) == window_key(105, 150)


def test_enqueue_files_by_window(arbiter, settings):
    room = _room(settings, {}, 'Alice')
    assert arbiter.enqueue(room, _sub(100, 'alice', 'TEAM')) == 0
    assert arbiter.enqueue(room, _sub(320, 'alice', 'MEAT')) == 2
    assert sorted(room.pending) == [0, 2]
    # Queueing never touches the pool
    assert room.pool == {}


def test_earliest_submission_wins_contested_letter(arbiter, settings):
    room = _room(settings, {'T': 1, 'E': 1, 'A': 1, 'M': 1}, 'Alice', 'Bob')
    # Bob's claim arrived first over the wire but carries the later timestamp
    arbiter.enqueue(room, _sub(105, 'bob', 'TEAM', seq=0))
    arbiter.enqueue(room, _sub(100, 'alice', 'TEAM', seq=1))

    accepted = arbiter.resolve(room, 0)

    assert [a.player_id for a in accepted] == ['alice']
    assert room.pool == {'T': 0, 'E': 0, 'A': 0, 'M': 0}
    assert room.players['alice'].live_score == 7
    assert room.players['bob'].live_score == 0
    assert room.word_counts == {'TEAM': 1}


def test_ties_keep_arrival_order(arbiter, settings):
    room = _room(settings, {'T': 1, 'E': 1, 'A': 1}, 'Alice', 'Bob')
    arbiter.enqueue(room, _sub(100, 'bob', 'TEA', seq=3))
    arbiter.enqueue(room, _sub(100, 'alice', 'EAT', seq=4))
    accepted = arbiter.resolve(room, 0)
    assert [a.player_id for a in accepted] == ['bob']


def test_non_overlapping_claims_both_accepted(arbiter, settings):
    room = _room(settings, {'T': 2, 'E': 2, 'A': 2, 'M': 1}, 'Alice', 'Bob')
    arbiter.enqueue(room, _sub(10, 'alice', 'TEAM'))
    arbiter.enqueue(room, _sub(20, 'bob', 'EAT'))
    accepted = arbiter.resolve(room, 0)
    assert {a.player_id for a in accepted} == {'alice', 'bob'}
    assert room.pool == {'T': 0, 'E': 0, 'A': 0, 'M': 0}


@pytest.mark.parametrize('word', ['TE4M', 'team', 'TE', 'MTEA', ''])
def test_invalid_words_are_dropped(arbiter, word):
    settings = Settings(min_len=3)
    room = _room(settings, {'T': 2, 'E': 2, 'A': 2, 'M': 2}, 'Alice')
    arbiter.enqueue(room, _sub(0, 'alice', word))
    assert arbiter.resolve(room, 0) == []
    assert room.pool == {'T': 2, 'E': 2, 'A': 2, 'M': 2}


def test_wildcard_pays_for_missing_letter(arbiter, settings):
    room = _room(settings, {'T': 1, 'E': 1, 'A': 1, WILDCARD: 1}, 'Alice')
    arbiter.enqueue(room, _sub(0, 'alice', 'TEAM'))
    accepted = arbiter.resolve(room, 0)
    assert len(accepted) == 1
    assert room.pool[WILDCARD] == 0
    # Score is computed from the word, not the tiles spent
    assert accepted[0].points == 7


def test_disallow_blocks_same_player_repeat(arbiter):
    settings = Settings(unique_words='disallow')
    room = _room(settings, {'T': 3, 'E': 3, 'A': 3, 'M': 3}, 'Alice', 'Bob')
    arbiter.enqueue(room, _sub(0, 'alice', 'TEAM'))
    arbiter.enqueue(room, _sub(1, 'alice', 'TEAM'))
    arbiter.enqueue(room, _sub(2, 'bob', 'TEAM'))
    accepted = arbiter.resolve(room, 0)
    assert [a.player_id for a in accepted] == ['alice', 'bob']

    arbiter.enqueue(room, _sub(200, 'alice', 'TEAM'))
    assert arbiter.resolve(room, 1) == []
    assert room.word_counts == {'TEAM': 2}


def test_repeat_allowed_with_decay_policy(arbiter, settings):
    room = _room(settings, {'T': 2, 'E': 2, 'A': 2, 'M': 2}, 'Alice')
    arbiter.enqueue(room, _sub(0, 'alice', 'TEAM'))
    arbiter.enqueue(room, _sub(1, 'alice', 'TEAM'))
    assert len(arbiter.resolve(room, 0)) == 2
    assert room.word_counts == {'TEAM': 2}
    assert room.players['alice'].live_score == 14


def test_window_resolves_once(arbiter, settings):
    room = _room(settings, {'T': 2, 'E': 2, 'A': 2, 'M': 2}, 'Alice')
    arbiter.enqueue(room, _sub(0, 'alice', 'TEAM'))
    assert len(arbiter.resolve(room, 0)) == 1
    assert arbiter.resolve(room, 0) == []
    assert 0 not in room.pending


def test_player_who_left_is_skipped(arbiter, settings):
    room = _room(settings, {'T': 1, 'E': 1, 'A': 1, 'M': 1}, 'Alice', 'Bob')
    arbiter.enqueue(room, _sub(0, 'alice', 'TEAM'))
    arbiter.enqueue(room, _sub(5, 'bob', 'TEAM'))
    del room.players['alice']
    accepted = arbiter.resolve(room, 0)
    assert [a.player_id for a in accepted] == ['bob']


def test_acceptance_feed_hides_word(arbiter, settings):
    room = _room(settings, {'Q': 1, 'U': 1, 'I': 1, 'Z': 1}, 'Alice')
    arbiter.enqueue(room, _sub(0, 'alice', 'QUIZ'))
    payload = arbiter.resolve(room, 0)[0].to_dict()
    assert payload == {
        'playerId': 'alice',
        'name': 'Alice',
        'letters': 4,
        'points': 26,
        'feed': 'Alice played 4 letters for 26 points.',
    }


def test_format_rule_rejects_trailing_newline(settings):
    from yoink.services.games import SubmissionArbiter

    # Even a word list that contains it cannot let a newline through
    lenient = SubmissionArbiter({'TEAM\n', 'TEAM'})
    room = _room(settings, {'T': 2, 'E': 2, 'A': 2, 'M': 2}, 'Alice')
    lenient.enqueue(room, _sub(0, 'alice', 'TEAM\n'))
    assert lenient.resolve(room, 0) == []
    assert room.pool == {'T': 2, 'E': 2, 'A': 2, 'M': 2}
