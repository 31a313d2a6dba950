"""Room registry: the single owner of room id -> GameState.

Every call reloads the full mapping from the store and writes it back
after a mutation; nothing is cached between calls.
"""
import logging
import threading
import uuid
from typing import Callable, List, Optional, Tuple

from tictactoe.services.games import GameState, create_game
from tictactoe.services.storage import PersistenceError, RoomStore, RoomRecords


class RoomNotFound(Exception):
    def __init__(self, room_id: str):
        super().__init__(f'Game not found: {room_id}')
        self.room_id = room_id


class RoomRegistry:
    def __init__(self, store: RoomStore, logger: Optional[logging.Logger] = None):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        # The store is read and written wholesale, so mutations of different
        # rooms race on the same blob; one lock covers every load-mutate-save.
        self._lock = threading.RLock()

    def _load(self) -> RoomRecords:
        return self.store.load()

    def _decode(self, room_id: str, record) -> GameState:
        try:
            return GameState.from_dict(record)
        except (AttributeError, TypeError, ValueError) as exc:
            raise PersistenceError(f"corrupt record for room {room_id}: {exc}") from exc

    def _state(self, rooms: RoomRecords, room_id: str) -> GameState:
        record = rooms.get(room_id)
        if record is None:
            raise RoomNotFound(room_id)
        return self._decode(room_id, record)

    def get(self, room_id: str) -> GameState:
        with self._lock:
            return self._state(self._load(), room_id)

    def find(self, room_id: str) -> Optional[GameState]:
        try:
            return self.get(room_id)
        except RoomNotFound:
            return None

    def list(self) -> List[Tuple[str, GameState]]:
        with self._lock:
            rooms = self._load()
            return [(room_id, self._decode(room_id, record)) for room_id, record in rooms.items()]

    def create(self) -> Tuple[str, GameState]:
        with self._lock:
            rooms = self._load()
            room_id = str(uuid.uuid4())
            while room_id in rooms:
                room_id = str(uuid.uuid4())
            state = create_game()
            rooms[room_id] = state.to_dict()
            self.store.save(rooms)
        self.logger.info(f"[create] room={room_id}")
        return room_id, state

    def update(self, room_id: str, state: GameState) -> None:
        with self._lock:
            rooms = self._load()
            if room_id not in rooms:
                raise RoomNotFound(room_id)
            rooms[room_id] = state.to_dict()
            self.store.save(rooms)

    def mutate(self, room_id: str, change: Callable[[GameState], GameState]) -> GameState:
        """Apply `change` to the stored state and persist the result.

        Exceptions raised by `change` propagate and nothing is saved.
        """
        with self._lock:
            rooms = self._load()
            new_state = change(self._state(rooms, room_id))
            rooms[room_id] = new_state.to_dict()
            self.store.save(rooms)
        return new_state

    def delete(self, room_id: str) -> None:
        with self._lock:
            rooms = self._load()
            if room_id not in rooms:
                raise RoomNotFound(room_id)
            del rooms[room_id]
            self.store.save(rooms)
        self.logger.info(f"[delete] room={room_id}")
