from flask import request
from flask_socketio import join_room, leave_room, emit

from yoink import get_registry

NAMESPACE = '/ws'


def room_channel(room_id: str) -> str:
    return f"room:{room_id}"


class SocketIOBroadcaster:
    """Outbound room broadcasts: lobby state, accepted claims, final results."""

    def __init__(self, sio, namespace: str = NAMESPACE):
        self.sio = sio
        self.namespace = namespace

    def _emit(self, event, payload, room):
        # Use socketio.emit since this is called from the round driver too
        self.sio.emit(event, payload, to=room_channel(room.id), namespace=self.namespace)

    def state(self, room):
        self._emit('lobby:state', room.to_dict(), room)

    def accepted(self, room, acceptance):
        self._emit('word:accepted', acceptance.to_dict(), room)

    def ended(self, room, leaderboard):
        self._emit('round:ended', {'leaderboard': leaderboard}, room)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_disconnect(*args):
    room = get_registry().leave(_get_sid())
    if room is not None:
        leave_room(room_channel(room.id))


def handle_join(data):
    data = data if isinstance(data, dict) else {}
    room_id = str(data.get('room') or '').strip()
    if not room_id:
        emit('error', {'message': 'room is required'})
        return
    registry = get_registry()
    previous = registry.seat_of(_get_sid())
    if previous and previous[0] != room_id:
        leave_room(room_channel(previous[0]))
    # Join the channel first so the joiner receives the state broadcast
    join_room(room_channel(room_id))
    player = registry.join(room_id, _get_sid(), data.get('name'))
    emit('joined', {'room': room_id, 'playerId': player.id})


def handle_submit(data):
    # Success-only feed: nothing is sent back for a refused claim
    word = data.get('word') if isinstance(data, dict) else None
    get_registry().submit(_get_sid(), word)


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    from yoink import socketio

    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('lobby:join', handle_join, namespace=namespace)
        socketio.on_event('word:submit', handle_submit, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
