"""Broadcast hub: per-room observer sets and state-change fan-out.

Connections only need `is_open()` and `send(event, payload)`; the
Socket.IO adapter lives in `socketio_events`.
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional, Set

from tictactoe.services.games import GameState

STATE_EVENT = 'state_update'


class BroadcastHub:
    def __init__(self, state_lookup: Callable[[str], Optional[GameState]],
                 logger: Optional[logging.Logger] = None):
        self._state_lookup = state_lookup
        self.logger = logger or logging.getLogger(__name__)
        self._observers: Dict[str, Set] = {}
        self._lock = threading.Lock()
        # Per room: sends are serialized, and every broadcast bumps the sequence
        self._send_locks: Dict[str, Any] = {}
        self._sequence: Dict[str, int] = {}

    def _send_lock(self, room_id: str):
        with self._lock:
            return self._send_locks.setdefault(room_id, threading.RLock())

    def observers(self, room_id: str) -> Set:
        with self._lock:
            return set(self._observers.get(room_id, ()))

    def rooms(self) -> Set[str]:
        with self._lock:
            return set(self._observers)

    def attach(self, room_id: str, connection) -> None:
        """Register `connection` and send it the room's current state, if any.

        If a broadcast for the room lands while the state is being looked up,
        the connection already received the newer state and the lookup
        result is dropped. A failing lookup leaves the connection detached.
        """
        with self._lock:
            self._observers.setdefault(room_id, set()).add(connection)
            seen = self._sequence.get(room_id, 0)
        try:
            state = self._state_lookup(room_id)
        except Exception:
            self.detach(room_id, connection)
            raise
        self.logger.info(f"[observer-attach] room={room_id} found={state is not None}")
        if state is None:
            return
        with self._send_lock(room_id):
            with self._lock:
                stale = self._sequence.get(room_id, 0) != seen
            if stale:
                self.logger.debug(f"[observer-skip] room={room_id} conn={connection!r} newer state already sent")
                return
            self._deliver(room_id, connection, state.to_dict())

    def detach(self, room_id: str, connection) -> None:
        with self._lock:
            conns = self._observers.get(room_id)
            if conns is None:
                return
            conns.discard(connection)
            if not conns:
                del self._observers[room_id]

    def detach_all(self, connection) -> None:
        with self._lock:
            for room_id in [r for r, conns in self._observers.items() if connection in conns]:
                conns = self._observers[room_id]
                conns.discard(connection)
                if not conns:
                    del self._observers[room_id]

    def forget(self, room_id: str) -> None:
        """Drop every observer of a deleted room without notifying them."""
        with self._lock:
            self._observers.pop(room_id, None)
            self._sequence.pop(room_id, None)
            self._send_locks.pop(room_id, None)

    def broadcast(self, room_id: str, state: GameState) -> int:
        """Push `state` to every open observer of the room. Returns the delivery count."""
        payload = state.to_dict()
        delivered = 0
        with self._send_lock(room_id):
            with self._lock:
                self._sequence[room_id] = self._sequence.get(room_id, 0) + 1
                connections = set(self._observers.get(room_id, ()))
            for connection in connections:
                if self._deliver(room_id, connection, payload):
                    delivered += 1
        return delivered

    def _deliver(self, room_id: str, connection, payload) -> bool:
        try:
            if not connection.is_open():
                self.logger.debug(f"[observer-skip] room={room_id} conn={connection!r} closed")
                return False
            connection.send(STATE_EVENT, payload)
            return True
        except Exception as exc:
            # One failing observer never affects the others or the requester
            self.logger.warning(f"[observer-error] room={room_id} conn={connection!r} error={exc}")
            return False
