from collections import deque
from typing import Any, Dict, Optional


class Player:
    def __init__(self, player_id: str, name: str, declared_bet: float):
        self.id = player_id
        self.name = name
        self.balance = 0.0
        self.declared_bet = declared_bet
        self.last_result: Optional[Dict[str, Any]] = None

    def to_dict(self):
        # declared_bet stays server-side; it only surfaces as lastBet after a round
        return {
            'name': self.name,
            'balance': self.balance,
            'lastResult': dict(self.last_result) if self.last_result else None,
        }

    def __repr__(self):
        return f"<Player {self.id} name={self.name!r} balance={self.balance}>"


class Room:
    def __init__(self, room_id: str, round_timer_seconds: float, history_limit: int = 50):
        self.id = room_id
        self.players: Dict[str, Player] = {}
        self.round_timer_seconds = round_timer_seconds
        self.round_counter = 0
        self.timer_handle = None  # active Countdown, or None while paused
        self.history = deque(maxlen=history_limit)

    @property
    def counting(self) -> bool:
        return self.timer_handle is not None

    def players_snapshot(self):
        return {pid: p.to_dict() for pid, p in self.players.items()}

    def to_dict(self, allowed_timers=None):
        return {
            'roomId': self.id,
            'roundIndex': self.round_counter,
            'roundTimer': self.round_timer_seconds,
            'allowedTimers': list(allowed_timers) if allowed_timers is not None else None,
            'counting': self.counting,
            'timeLeft': self.timer_handle.time_left if self.timer_handle else None,
            'players': self.players_snapshot(),
            'history': list(self.history),
        }

    def __repr__(self):
        return f"<Room {self.id} players={len(self.players)} round={self.round_counter}>"
