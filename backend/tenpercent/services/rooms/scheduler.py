import time

from tenpercent import socketio


def schedule_countdown(app, room_id: str, countdown) -> None:
    """Drive a room's countdown from a Socket.IO background task.

    - No-ops in TESTING mode (tests advance the controller by hand)
    - Steps the countdown every TICK_INTERVAL_MS on the controller
    - Exits as soon as the countdown is no longer the room's active one,
      which covers stop, expiry and a newer countdown taking over
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    interval = int(app.config.get('TICK_INTERVAL_MS', 100)) / 1000.0
    try:
        hb = float(app.config.get('TIMER_HEARTBEAT_SEC', 0))
    except (TypeError, ValueError):
        hb = 0

    def _worker(rid: str, handle) -> None:
        controller = app.extensions['rooms']
        last_beat = time.monotonic()
        while True:
            socketio.sleep(interval)
            if not controller.advance(rid, countdown=handle):
                app.logger.debug(f"[timer-exit] room={rid}")
                return
            if hb > 0 and time.monotonic() - last_beat >= hb:
                last_beat = time.monotonic()
                app.logger.info(f"[timer-heartbeat] room={rid} remaining={handle.time_left}s")

    socketio.start_background_task(_worker, room_id, countdown)
