from flask_socketio import emit
from flask import request, current_app
from tictactoe import socketio, get_services
from tictactoe.services.storage import PersistenceError
from typing import Any, Dict


class SocketConnection:
    """One Socket.IO client as seen by the broadcast hub."""

    def __init__(self, sid: str, namespace: str):
        self.sid = sid
        self.namespace = namespace

    def is_open(self) -> bool:
        return socketio.server.manager.is_connected(self.sid, self.namespace)

    def send(self, event: str, payload: Dict[str, Any]) -> None:
        socketio.emit(event, payload, to=self.sid, namespace=self.namespace)

    def __eq__(self, other):
        return isinstance(other, SocketConnection) and (self.sid, self.namespace) == (other.sid, other.namespace)

    def __hash__(self):
        return hash((self.sid, self.namespace))

    def __repr__(self):
        return f"SocketConnection({self.sid!r}, {self.namespace!r})"


def _current_connection() -> SocketConnection:
    # type: ignore: request.sid and request.namespace exist in Socket.IO context
    return SocketConnection(request.sid, request.namespace)  # type: ignore


def _room_id(data) -> str:
    room_id = data.get('room_id') if isinstance(data, dict) else None
    return room_id if isinstance(room_id, str) else ''


def handle_connect():
    emit('connected', {'message': f'Connected to {request.namespace}'})


def handle_disconnect(*args):
    get_services().hub.detach_all(_current_connection())


def handle_join_game(data):
    room_id = _room_id(data)
    if not room_id:
        emit('error', {'message': 'room_id is required'})
        return
    # Pushes the current state first when the room exists
    try:
        get_services().hub.attach(room_id, _current_connection())
    except PersistenceError as exc:
        current_app.logger.error(f"[storage-error] join_game room={room_id}: {exc}")
        emit('error', {'message': 'Game storage unavailable'})
        return
    emit('joined', {'room': room_id})


def handle_leave_game(data):
    room_id = _room_id(data)
    if not room_id:
        emit('error', {'message': 'room_id is required'})
        return
    get_services().hub.detach(room_id, _current_connection())
    emit('left', {'room': room_id})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/ws', testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on `namespace`. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [namespace]
    if testing and namespace != '/':
        namespaces.append('/')
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('disconnect', handle_disconnect, namespace=ns)
        socketio.on_event('join_game', handle_join_game, namespace=ns)
        socketio.on_event('leave_game', handle_leave_game, namespace=ns)
        socketio.on_event('ping', handle_ping, namespace=ns)
