import logging
import math
import random
import threading
from typing import Any, Dict, List, Optional, Sequence

from tenpercent.models import Player, Room
from .payout import (
    BET_DEFAULT, BET_MAX, BET_MIN,
    InsufficientPlayers, RoundOutcome, coerce_bet, resolve_round, settle_round,
)
from .registry import RoomRegistry
from .timer import RoundTimer

ALLOWED_TIMERS = (0.1, 1, 10, 60)
TIMER_MATCH_TOLERANCE = 1e-6

WAITING_WARNING = 'Not enough players to start the round (minimum {min_players} required).'
SHORT_ROUND_WARNING = 'Not enough players to run a round.'


class RoomController:
    """Runs every room through its Paused / Counting Down cycle.

    All public methods take the controller lock, so socket handlers and the
    countdown driver never interleave inside one operation. Unknown rooms and
    players are ignored rather than reported.
    """

    def __init__(self, notifier, registry: Optional[RoomRegistry] = None, rng=None,
                 allowed_timers: Sequence[float] = ALLOWED_TIMERS, default_timer: float = 10,
                 min_players: int = 2, tick_interval: float = 0.1, emit_interval: float = 0.1,
                 bet_min: float = BET_MIN, bet_max: float = BET_MAX, bet_default: float = BET_DEFAULT,
                 name_max_length: int = 40, history_limit: int = 50, spawn=None, logger=None):
        self.notifier = notifier
        self.logger = logger or logging.getLogger(__name__)
        self.registry = registry or RoomRegistry(default_timer, history_limit, logger=self.logger)
        self.rng = rng or random.Random()
        self.allowed_timers = tuple(allowed_timers)
        self.min_players = max(2, int(min_players))
        self.bet_min = bet_min
        self.bet_max = bet_max
        self.bet_default = bet_default
        self.name_max_length = name_max_length
        self.timer = RoundTimer(notifier, tick_interval, emit_interval, spawn=spawn, logger=self.logger)
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config, notifier, rng=None, spawn=None, logger=None):
        return cls(
            notifier,
            rng=rng,
            allowed_timers=config.get('ALLOWED_TIMERS', ALLOWED_TIMERS),
            default_timer=config.get('DEFAULT_ROUND_TIMER_SEC', 10),
            min_players=config.get('MIN_PLAYERS', 2),
            tick_interval=config.get('TICK_INTERVAL_MS', 100) / 1000.0,
            emit_interval=config.get('TICK_EMIT_INTERVAL_MS', 100) / 1000.0,
            bet_min=config.get('BET_MIN', BET_MIN),
            bet_max=config.get('BET_MAX', BET_MAX),
            bet_default=config.get('BET_DEFAULT', BET_DEFAULT),
            name_max_length=config.get('NAME_MAX_LENGTH', 40),
            history_limit=config.get('ROUND_HISTORY_LIMIT', 50),
            spawn=spawn,
            logger=logger,
        )

    # ---- inbound intents ----

    def join(self, player_id, room_id, name=None, starting_bet=None) -> Optional[Room]:
        room_id = _room_key(room_id)
        if room_id is None:
            return None
        with self._lock:
            room = self.registry.get_or_create(room_id)
            display = str(name or f"Player_{random.randint(0, 999)}")[:self.name_max_length]
            bet = self._coerce_bet(starting_bet)
            room.players[player_id] = Player(player_id, display, bet)
            self.logger.info(f"[join] player={player_id} room={room_id} name={display!r}")
            self.logger.debug(f"[join] player={player_id} room={room_id} start_bet={bet}")
            self.notifier.send(player_id, 'allowedTimers', self.allowed_timers_payload(room))
            self._broadcast_players(room)
            self.ensure_round_state(room)
            return room

    def set_bet(self, player_id, room_id, bet) -> Optional[float]:
        with self._lock:
            player = self._find_player(room_id, player_id)
            if player is None:
                return None
            player.declared_bet = self._coerce_bet(bet)
            # bets stay secret until the round resolves; nothing is broadcast
            self.logger.debug(f"[bet] player={player_id} room={room_id} declared_bet={player.declared_bet}")
            return player.declared_bet

    def set_name(self, player_id, room_id, name) -> Optional[str]:
        with self._lock:
            player = self._find_player(room_id, player_id)
            if player is None:
                return None
            player.name = str(name or '')[:self.name_max_length]
            self.logger.info(f"[name] player={player_id} room={room_id} name={player.name!r}")
            self._broadcast_players(self.registry.get(_room_key(room_id)))
            return player.name

    def set_timer(self, player_id, room_id, timer) -> bool:
        with self._lock:
            room = self.registry.get(_room_key(room_id))
            if room is None or player_id not in room.players:
                return False
            value = self.match_allowed_timer(timer)
            if value is None:
                self.logger.info(
                    f"[timer-reject] room={room.id} raw={timer!r} allowed={','.join(str(t) for t in self.allowed_timers)}"
                )
                self.notifier.send(player_id, 'allowedTimers', self.allowed_timers_payload(room))
                return False
            room.round_timer_seconds = value
            self.logger.info(f"[timer-set] room={room.id} round_timer={value}")
            self.notifier.broadcast(room.id, 'allowedTimers', self.allowed_timers_payload(room))
            # a running countdown keeps its length; the new value applies from the next start
            self.ensure_round_state(room)
            return True

    def disconnect(self, player_id) -> List[str]:
        with self._lock:
            left = []
            for room in self.registry.rooms_with_player(player_id):
                self.registry.remove_player(room.id, player_id)
                left.append(room.id)
                self.logger.info(f"[leave] player={player_id} room={room.id} remaining={len(room.players)}")
                self._broadcast_players(room)
                self.ensure_round_state(room)
            return left

    # ---- lifecycle ----

    def ensure_round_state(self, room: Room) -> None:
        count = len(room.players)
        if count < self.min_players:
            self.timer.stop(room)
            self.notifier.broadcast(room.id, 'warning', WAITING_WARNING.format(min_players=self.min_players))
            self.logger.info(f"[room-wait] room={room.id} waiting for players have={count}")
            return
        self.notifier.broadcast(room.id, 'warning', '')
        if room.timer_handle is None:
            self.timer.start(room)

    def advance(self, room_id, dt: Optional[float] = None, countdown=None) -> bool:
        """Step a room's countdown, resolving the round when it reaches zero.

        When ``countdown`` is given the step only applies if it is still the
        room's active countdown. Returns whether that countdown is still
        running afterwards, which is what a driver loop needs to decide
        whether to keep going.
        """
        with self._lock:
            room = self.registry.get(_room_key(room_id))
            if room is None or room.timer_handle is None:
                return False
            if countdown is not None and room.timer_handle is not countdown:
                return False
            active = room.timer_handle
            if self.timer.advance(room, dt):
                self.run_round(room)
            return room.timer_handle is active

    def run_round(self, room: Room) -> Optional[RoundOutcome]:
        with self._lock:
            try:
                outcome = resolve_round(room, self.rng, self.bet_default, self.bet_min, self.bet_max)
            except InsufficientPlayers as exc:
                self.logger.info(f"[round-skip] room={room.id} players={exc.player_count}")
                self.notifier.broadcast(room.id, 'warning', SHORT_ROUND_WARNING)
                self.ensure_round_state(room)
                return None
            settle_round(room, outcome)
            self.logger.info(
                f"[round] room={room.id} round={outcome.round_index} pot={outcome.pot} "
                f"loser={outcome.loser_id} loser_bet={outcome.loser_bet}"
            )
            self.logger.debug(f"[round] room={room.id} round={outcome.round_index} bets={outcome.bets}")
            players = room.players_snapshot()
            self.notifier.broadcast(room.id, 'playersUpdate', players)
            self.notifier.broadcast(room.id, 'roundResult', {
                'roomId': room.id,
                'roundIndex': outcome.round_index,
                'loser': outcome.loser_id,
                'players': players,
            })
            self.ensure_round_state(room)
            return outcome

    # ---- queries ----

    def allowed_timers_payload(self, room: Room) -> Dict[str, Any]:
        return {'options': list(self.allowed_timers), 'current': room.round_timer_seconds}

    def match_allowed_timer(self, raw) -> Optional[float]:
        try:
            value = float(raw)
        except (TypeError, ValueError, OverflowError):
            return None
        if not math.isfinite(value):
            return None
        for allowed in self.allowed_timers:
            if abs(allowed - value) < TIMER_MATCH_TOLERANCE:
                return allowed
        return None

    def room_state(self, room_id) -> Optional[Dict[str, Any]]:
        with self._lock:
            room = self.registry.get(_room_key(room_id))
            if room is None:
                return None
            return room.to_dict(self.allowed_timers)

    def list_rooms(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                {'roomId': room.id, 'players': len(room.players), 'counting': room.counting}
                for room in self.registry
            ]

    # ---- helpers ----

    def _coerce_bet(self, raw) -> float:
        return coerce_bet(raw, self.bet_default, self.bet_min, self.bet_max)

    def _find_player(self, room_id, player_id) -> Optional[Player]:
        room = self.registry.get(_room_key(room_id))
        if room is None:
            return None
        return room.players.get(player_id)

    def _broadcast_players(self, room: Room) -> None:
        self.notifier.broadcast(room.id, 'playersUpdate', room.players_snapshot())


def _room_key(room_id) -> Optional[str]:
    if room_id is None:
        return None
    key = str(room_id)
    return key or None
