import os
from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    static_folder = current_app.static_folder
    if static_folder and os.path.isfile(os.path.join(static_folder, 'index.html')):
        return current_app.send_static_file('index.html')
    return jsonify({'message': 'Welcome to the TenPercent game server!'})


@main.route('/health')
def health():
    return jsonify({'status': 'healthy'})


@main.route('/api/rooms')
def list_rooms():
    return jsonify(current_app.extensions['rooms'].list_rooms())


@main.route('/api/rooms/<string:room_id>')
def get_room_state(room_id):
    """
    Returns the public state of a room: players, balances, timer and the
    summaries of recently resolved rounds. Declared bets are not included.
    """
    state = current_app.extensions['rooms'].room_state(room_id)
    if state is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(state)
