import logging
from typing import Dict, List, Optional

from tenpercent.models import Room


class RoomRegistry:
    """In-memory rooms keyed by id. Rooms are never removed."""

    def __init__(self, default_timer: float = 10, history_limit: int = 50, logger=None):
        self.default_timer = default_timer
        self.history_limit = history_limit
        self.logger = logger or logging.getLogger(__name__)
        self._rooms: Dict[str, Room] = {}

    def get(self, room_id) -> Optional[Room]:
        return self._rooms.get(room_id)

    def get_or_create(self, room_id) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id, self.default_timer, self.history_limit)
            self._rooms[room_id] = room
            self.logger.info(f"[room-created] room={room_id} timer={self.default_timer}")
        return room

    def remove_player(self, room_id, player_id) -> bool:
        room = self._rooms.get(room_id)
        if room is None:
            return False
        return room.players.pop(player_id, None) is not None

    def rooms_with_player(self, player_id) -> List[Room]:
        return [room for room in self._rooms.values() if player_id in room.players]

    def __contains__(self, room_id):
        return room_id in self._rooms

    def __iter__(self):
        return iter(list(self._rooms.values()))

    def __len__(self):
        return len(self._rooms)
