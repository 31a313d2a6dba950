from flask import Blueprint, jsonify, request, current_app
from tictactoe import get_services
from tictactoe.api.schemas import MoveRequest, ResetRequest, RequestError
from tictactoe.services.games import MoveError, apply_move, reset_game
from tictactoe.services.registry import RoomNotFound
from tictactoe.services.storage import PersistenceError


games = Blueprint('games', __name__)


@games.errorhandler(RoomNotFound)
def _room_not_found(exc: RoomNotFound):
    return jsonify({'error': 'Game not found'}), 404


@games.errorhandler(MoveError)
def _invalid_move(exc: MoveError):
    return jsonify({'error': exc.message}), 400


@games.errorhandler(RequestError)
def _bad_request(exc: RequestError):
    return jsonify({'error': exc.message}), exc.status


@games.errorhandler(PersistenceError)
def _storage_failed(exc: PersistenceError):
    current_app.logger.error(f"[storage-error] {request.method} {request.path}: {exc}")
    return jsonify({'error': 'Game storage unavailable'}), 500


@games.route('/games', methods=['GET'])
def list_games():
    registry = get_services().registry
    return jsonify([
        {
            'room': room_id,
            'board': state.board,
            'currentPlayer': state.current_player,
            'won': state.won,
        }
        for room_id, state in registry.list()
    ])


@games.route('/games/<string:room_id>', methods=['GET'])
def get_game(room_id):
    state = get_services().registry.get(room_id)
    return jsonify({'room': state.to_dict()})


@games.route('/create', methods=['POST'])
def create_game():
    # No observers can exist yet for a new room, so nothing is broadcast
    room_id, _state = get_services().registry.create()
    return jsonify({'roomId': room_id})


@games.route('/makeMove/<string:room_id>', methods=['POST'])
def make_move(room_id):
    move = MoveRequest.from_json(request.get_json(silent=True))
    services = get_services()
    state = services.registry.mutate(room_id, lambda current: apply_move(current, move.position))
    current_app.logger.info(
        f"[move] room={room_id} position={move.position} next={state.current_player} won={state.won}"
    )
    services.hub.broadcast(room_id, state)
    return jsonify({
        'boardState': state.board,
        'currentPlayer': state.current_player,
        'won': state.won,
    })


@games.route('/reset', methods=['POST'])
def reset():
    body = ResetRequest.from_json(request.get_json(silent=True))
    services = get_services()
    state = services.registry.mutate(body.room_id, lambda _current: reset_game())
    current_app.logger.info(f"[reset] room={body.room_id}")
    services.hub.broadcast(body.room_id, state)
    return jsonify({'room': state.to_dict()})


@games.route('/games/<string:room_id>', methods=['DELETE'])
def delete_game(room_id):
    services = get_services()
    services.registry.delete(room_id)
    services.hub.forget(room_id)
    return jsonify({'message': 'Game deleted'})
