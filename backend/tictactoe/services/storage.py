"""Room persistence backends.

A store holds the whole room mapping `{room_id: {board, currentPlayer, won}}`
and is always loaded and saved as a unit.
"""
import json
import os
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from tictactoe import db
from tictactoe.models import Room

RoomRecords = Dict[str, Dict[str, Any]]


class PersistenceError(Exception):
    """The room store could not be read or written."""


class RoomStore:
    def load(self) -> RoomRecords:
        raise NotImplementedError

    def save(self, rooms: RoomRecords) -> None:
        raise NotImplementedError


class JsonFileRoomStore(RoomStore):
    """All rooms in a single pretty-printed JSON file."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> RoomRecords:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f'cannot read {self.path}: {exc}') from exc
        if not isinstance(data, dict):
            raise PersistenceError(f'{self.path} does not hold a room mapping')
        return data

    def save(self, rooms: RoomRecords) -> None:
        try:
            with open(self.path, 'w', encoding='utf-8') as fh:
                json.dump(rooms, fh, indent=2)
        except (OSError, TypeError) as exc:
            raise PersistenceError(f'cannot write {self.path}: {exc}') from exc


class SqlRoomStore(RoomStore):
    """Rooms as rows of the `room` table. Needs an application context."""

    def load(self) -> RoomRecords:
        try:
            return {room.id: room.to_record() for room in Room.query.all()}
        except (SQLAlchemyError, ValueError) as exc:
            db.session.rollback()
            raise PersistenceError(f'cannot read room table: {exc}') from exc

    def save(self, rooms: RoomRecords) -> None:
        try:
            existing = {room.id: room for room in Room.query.all()}
            for room_id, room in existing.items():
                if room_id not in rooms:
                    db.session.delete(room)
            for room_id, record in rooms.items():
                room = existing.get(room_id)
                if room is None:
                    room = Room(id=room_id)
                room.set_record(record)
                db.session.add(room)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceError(f'cannot write room table: {exc}') from exc


def build_room_store(config) -> RoomStore:
    kind = (config.get('ROOM_STORE') or 'sql').lower()
    if kind == 'json':
        return JsonFileRoomStore(config['ROOM_STORE_PATH'])
    if kind == 'sql':
        return SqlRoomStore()
    raise ValueError(f'Unknown ROOM_STORE {kind!r}')
