import math
from typing import Any, Dict

from tenpercent.models import Room
from .rounding import round_to, SHARE_PLACES, BALANCE_PLACES, AVERAGE_PLACES

BET_MIN = 1.0
BET_MAX = 10.0
BET_DEFAULT = 5.0


class InsufficientPlayers(Exception):
    """Raised when a round is resolved with fewer than two players."""

    def __init__(self, room_id, player_count):
        self.room_id = room_id
        self.player_count = player_count
        super().__init__(f"Room {room_id} has {player_count} player(s), need at least 2")


def coerce_bet(raw: Any, default: float = BET_DEFAULT, low: float = BET_MIN, high: float = BET_MAX) -> float:
    """Turn any client-supplied bet into a number in [low, high].

    Anything that does not parse to a finite number becomes ``default``.
    """
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        value = default
    if not math.isfinite(value):
        value = default
    return max(low, min(high, value))


class RoundOutcome:
    def __init__(self, room_id, round_index, loser_id, pot, bets, results):
        self.room_id = room_id
        self.round_index = round_index
        self.loser_id = loser_id
        self.pot = pot
        self.bets: Dict[str, float] = bets
        self.results: Dict[str, Dict[str, Any]] = results

    @property
    def loser_bet(self) -> float:
        return self.bets[self.loser_id]

    @property
    def deltas(self) -> Dict[str, float]:
        return {pid: r['delta'] for pid, r in self.results.items()}

    def summary(self):
        return {
            'round': self.round_index,
            'loser': self.loser_id,
            'pot': self.pot,
            'bets': dict(self.bets),
            'deltas': self.deltas,
        }


def resolve_round(room: Room, rng, default_bet: float = BET_DEFAULT,
                  low: float = BET_MIN, high: float = BET_MAX) -> RoundOutcome:
    """Compute the outcome of one round without touching the room.

    Bets are snapshotted up front; the loser is drawn uniformly with
    ``rng.choice``. The loser forfeits their bet and every other player
    receives a share of it proportional to their own bet.
    """
    ids = list(room.players)
    if len(ids) < 2:
        raise InsufficientPlayers(room.id, len(ids))

    bets = {pid: coerce_bet(room.players[pid].declared_bet, default_bet, low, high) for pid in ids}
    pot = sum(bets.values())
    loser_id = rng.choice(ids)
    loser_bet = bets[loser_id]
    others_total = pot - loser_bet

    results = {}
    for pid in ids:
        avg_others = round_to((pot - bets[pid]) / (len(ids) - 1), AVERAGE_PLACES)
        if pid == loser_id:
            results[pid] = {'win': False, 'delta': -loser_bet, 'lastBet': bets[pid], 'avgOthers': avg_others}
            continue
        # all other bets are clamped to >= low, so this only trips if low is configured to 0
        if others_total > 0:
            share = round_to((bets[pid] / others_total) * loser_bet, SHARE_PLACES)
        else:
            share = 0.0
        results[pid] = {'win': True, 'delta': share, 'lastBet': bets[pid], 'avgOthers': avg_others}

    return RoundOutcome(room.id, room.round_counter + 1, loser_id, pot, bets, results)


def settle_round(room: Room, outcome: RoundOutcome) -> None:
    """Apply a resolved outcome to the room's players and counters."""
    for pid, result in outcome.results.items():
        player = room.players.get(pid)
        if player is None:
            continue
        player.balance = round_to(player.balance + result['delta'], BALANCE_PLACES)
        player.last_result = dict(result)
    room.round_counter = outcome.round_index
    room.history.append(outcome.summary())
