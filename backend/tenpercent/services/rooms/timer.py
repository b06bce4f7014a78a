import logging
from typing import Callable, Optional

from tenpercent.models import Room
from .rounding import round_to, TIMER_PLACES


class Countdown:
    """Remaining time of one round, advanced explicitly with ``tick``.

    The countdown has no notion of wall-clock time; whoever owns it decides
    how often to call ``tick`` and with which step.
    """

    def __init__(self, duration: float, emit_interval: float = 0.0):
        self.duration = duration
        self.time_left = max(0.0, round_to(float(duration), TIMER_PLACES))
        self.emit_interval = emit_interval
        self._since_emit = 0.0

    @property
    def finished(self) -> bool:
        return self.time_left <= 0

    def tick(self, dt: float) -> bool:
        """Advance by ``dt`` seconds; return True when a tick should be emitted."""
        if self.finished:
            return False
        self.time_left = max(0.0, round_to(self.time_left - dt, TIMER_PLACES))
        self._since_emit = round_to(self._since_emit + dt, TIMER_PLACES)
        if self.finished or self._since_emit >= self.emit_interval:
            self._since_emit = 0.0
            return True
        return False

    def __repr__(self):
        return f"<Countdown {self.time_left}/{self.duration}>"


class RoundTimer:
    """Owns the single active countdown of each room.

    ``spawn`` is called with ``(room_id, countdown)`` whenever a new countdown
    starts; it is how a real clock gets attached. Without it the countdown
    only moves when ``advance`` is called.
    """

    def __init__(self, notifier, tick_interval: float = 0.1, emit_interval: float = 0.1,
                 spawn: Optional[Callable] = None, logger=None):
        self.notifier = notifier
        self.tick_interval = tick_interval
        self.emit_interval = emit_interval
        self.spawn = spawn
        self.logger = logger or logging.getLogger(__name__)

    def start(self, room: Room) -> bool:
        if room.timer_handle is not None:
            self.logger.debug(f"[timer-skip] room={room.id} already counting down")
            return False
        countdown = Countdown(room.round_timer_seconds, self.emit_interval)
        room.timer_handle = countdown
        self.notifier.broadcast(room.id, 'timer', countdown.time_left)
        self.logger.info(
            f"[timer-start] room={room.id} timer={room.round_timer_seconds} tick_ms={int(self.tick_interval * 1000)}"
        )
        if self.spawn is not None:
            self.spawn(room.id, countdown)
        return True

    def stop(self, room: Room) -> None:
        if room.timer_handle is None:
            return
        self.logger.info(f"[timer-stop] room={room.id} time_left={room.timer_handle.time_left}")
        room.timer_handle = None

    def advance(self, room: Room, dt: Optional[float] = None) -> bool:
        """Move the room's countdown one step; return True when it just expired."""
        countdown = room.timer_handle
        if countdown is None:
            return False
        if countdown.tick(self.tick_interval if dt is None else dt):
            self.notifier.broadcast(room.id, 'timer', countdown.time_left)
        if countdown.finished:
            room.timer_handle = None
            return True
        return False
