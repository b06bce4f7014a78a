from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import functools
import random
import click
from config import Config

allowed_origins = "*"
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(
        __name__,
        static_folder=getattr(config_class, 'STATIC_FOLDER', None),
        static_url_path='',
    )
    flask_app.config.from_object(config_class)

    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from tenpercent.main import main
    flask_app.register_blueprint(main)

    # Round engine: one controller per app, reached through app.extensions
    from tenpercent.services.rooms import RoomController
    from tenpercent.services.rooms.scheduler import schedule_countdown
    from tenpercent.socketio_events import SocketIONotifier, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['rooms'] = RoomController.from_config(
        flask_app.config,
        SocketIONotifier(namespace),
        spawn=functools.partial(schedule_countdown, flask_app),
        logger=flask_app.logger,
    )
    register_socketio_handlers(namespace)

    @click.command('simulate-rounds')
    @click.option('--players', default=3, show_default=True, help='Players in the simulated room.')
    @click.option('--rounds', default=1000, show_default=True, help='Rounds to resolve.')
    @click.option('--seed', default=None, type=int, help='Seed for bets and loser picks.')
    def simulate_rounds_command(players, rounds, seed):
        """Resolve many rounds offline and print final balances."""
        from tenpercent.services.rooms.simulation import simulate_rounds

        rng = random.Random(seed)
        balances = simulate_rounds(players, rounds, rng, flask_app.config)
        for name, balance in balances.items():
            click.echo(f"{name}: {balance:+.6f}")
        click.echo(f"sum of balances: {sum(balances.values()):+.6f}")

    flask_app.cli.add_command(simulate_rounds_command)

    return flask_app
