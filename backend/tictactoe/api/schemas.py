"""Request bodies accepted by the games API.

Bodies are parsed into these structures before any game logic runs.
A body that is not a JSON object is read as an empty one.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


class RequestError(Exception):
    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


def _as_object(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


@dataclass(frozen=True)
class MoveRequest:
    # Kept raw: integer checks belong to the engine so its error order holds
    position: Any = None

    @classmethod
    def from_json(cls, data: Any) -> 'MoveRequest':
        return cls(position=_as_object(data).get('position'))


@dataclass(frozen=True)
class ResetRequest:
    room_id: str

    @classmethod
    def from_json(cls, data: Any) -> 'ResetRequest':
        body = _as_object(data)
        room_id: Optional[Any] = body.get('gameId') or body.get('roomId')
        if not room_id or not isinstance(room_id, str):
            raise RequestError('roomId is required')
        return cls(room_id=room_id)
