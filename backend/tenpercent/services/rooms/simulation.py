"""Offline round simulation used by the ``simulate-rounds`` CLI command."""

from typing import Dict


class _NullNotifier:
    def broadcast(self, room_id, event, payload):
        pass

    def send(self, player_id, event, payload):
        pass


def simulate_rounds(players: int, rounds: int, rng, config=None) -> Dict[str, float]:
    """Play ``rounds`` rounds in a private room with random bets.

    Every player re-declares a random bet before each round. The room is
    driven through the controller, so clamping, rounding and round chaining
    are the same as in a live room; only the clock is skipped.
    """
    from .controller import RoomController

    controller = RoomController.from_config(config or {}, _NullNotifier(), rng=rng)
    room_id = 'simulation'
    ids = [f"p{i + 1}" for i in range(max(2, players))]
    for pid in ids:
        controller.join(pid, room_id, name=pid)

    room = controller.registry.get(room_id)
    for _ in range(rounds):
        for pid in ids:
            controller.set_bet(pid, room_id, rng.uniform(controller.bet_min, controller.bet_max))
        controller.timer.stop(room)
        controller.run_round(room)
    controller.timer.stop(room)
    return {p.name: p.balance for p in room.players.values()}
