from flask import Blueprint, jsonify

from yoink import get_registry

rooms = Blueprint('rooms', __name__)


def _room_or_404(room_id):
    room = get_registry().get(room_id)
    if room is None:
        return None, (jsonify({'error': 'Room not found'}), 404)
    return room, None


@rooms.route('', methods=['GET'])
def list_rooms():
    """
    Returns every live room with its head count and round state.
    """
    registry = get_registry()
    listing = []
    for room_id in registry.room_ids():
        room = registry.get(room_id)
        if room is None:
            continue
        with room.lock:
            listing.append({
                'id': room.id,
                'players': len(room.players),
                'started': room.started,
                'endsInMs': room.ends_in_ms(),
            })
    return jsonify(listing), 200


@rooms.route('/<string:room_id>/state', methods=['GET'])
def get_room_state(room_id):
    room, error = _room_or_404(room_id)
    if error:
        return error
    with room.lock:
        return jsonify(room.to_dict()), 200


@rooms.route('/<string:room_id>/results', methods=['GET'])
def get_room_results(room_id):
    """
    Returns the leaderboard of the last finished round.
    """
    room, error = _room_or_404(room_id)
    if error:
        return error
    with room.lock:
        if room.last_results is None:
            return jsonify({'error': 'No finished round yet'}), 404
        return jsonify({'leaderboard': room.last_results}), 200
