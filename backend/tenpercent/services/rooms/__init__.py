"""Room domain services: registry, countdowns, payouts and lifecycle.

This package contains the round engine. It knows nothing about Socket.IO
or Flask; outbound notifications go through a notifier object that the
transport layer supplies, so the engine can be driven directly in tests.
"""

from .controller import RoomController
from .payout import InsufficientPlayers, resolve_round, settle_round
from .registry import RoomRegistry
from .timer import Countdown, RoundTimer

__all__ = [
    'Countdown',
    'InsufficientPlayers',
    'RoomController',
    'RoomRegistry',
    'RoundTimer',
    'resolve_round',
    'settle_round',
]
