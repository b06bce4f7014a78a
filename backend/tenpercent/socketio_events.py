from flask import current_app, request
from flask_socketio import emit, join_room
from tenpercent import socketio
from typing import Any, Dict


class SocketIONotifier:
    """Outbound side of the room engine, backed by Socket.IO rooms.

    Every player joins a Socket.IO room named after the game room, and
    Socket.IO already keeps a private room per session id, so both
    broadcasts and direct replies are plain ``socketio.emit`` calls.
    """

    def __init__(self, namespace: str = '/'):
        self.namespace = namespace

    def broadcast(self, room_id: str, event: str, payload: Any) -> None:
        socketio.emit(event, payload, to=room_id, namespace=self.namespace)

    def send(self, player_id: str, event: str, payload: Any) -> None:
        socketio.emit(event, payload, to=player_id, namespace=self.namespace)


def _controller():
    return current_app.extensions['rooms']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def handle_connect(*args):
    current_app.logger.info(f"[socket] connected {_get_sid()}")
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(*args):
    sid = _get_sid()
    current_app.logger.info(f"[socket] disconnected {sid}")
    _controller().disconnect(sid)


def handle_join_room(data):
    data = _payload(data)
    room_id = data.get('roomId')
    if room_id is None or str(room_id) == '':
        return
    # the socket must be in the room before the controller broadcasts to it
    join_room(str(room_id))
    _controller().join(_get_sid(), room_id, data.get('name'), data.get('startingBet'))


def handle_set_bet(data):
    data = _payload(data)
    _controller().set_bet(_get_sid(), data.get('roomId'), data.get('bet'))


def handle_set_name(data):
    data = _payload(data)
    _controller().set_name(_get_sid(), data.get('roomId'), data.get('name'))


def handle_set_timer(data):
    data = _payload(data)
    _controller().set_timer(_get_sid(), data.get('roomId'), data.get('timer'))


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Event names match what the browser client emits.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('setBet', handle_set_bet, namespace=namespace)
    socketio.on_event('setName', handle_set_name, namespace=namespace)
    socketio.on_event('setTimer', handle_set_timer, namespace=namespace)
