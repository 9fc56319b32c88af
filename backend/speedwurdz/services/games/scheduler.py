from speedwurdz import socketio
from .session import COUNTDOWN, PLAYING


class CountdownHandle:
    """Cancellable pre-game countdown for one session."""

    def __init__(self, table_id: str):
        self.table_id = table_id
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


def schedule_countdown(app, registry, table, namespace: str) -> CountdownHandle:
    """Start the 1-second countdown for ``table``'s session and deal when it hits zero.

    - Runs inline in TESTING mode (unless ENABLE_SCHEDULER_IN_TESTS is set)
    - Stops on the first tick where the handle is cancelled or the session is
      no longer counting down
    - Emits countdown-update every tick and game-started once play begins
    """
    session = table.session
    handle = CountdownHandle(table.id)
    with session.lock:
        session.countdown = handle
    tick_sec = float(app.config.get('COUNTDOWN_TICK_SEC', 1.0))
    room = table.room

    def _worker():
        while True:
            if tick_sec > 0:
                socketio.sleep(tick_sec)
            if handle.cancelled or session.status != COUNTDOWN:
                app.logger.info(f"[countdown-abort] table={table.id} status={session.status}")
                return
            remaining = session.tick_countdown()
            if remaining is None:
                app.logger.info(f"[countdown-abort] table={table.id} status={session.status}")
                return
            app.logger.info(f"[countdown-tick] table={table.id} timer={remaining}")
            socketio.emit('countdown-update', {'timer': remaining}, to=room, namespace=namespace)
            if session.status == PLAYING:
                socketio.emit('game-started', {'gameState': session.to_dict()}, to=room, namespace=namespace)
                socketio.emit('table-updated', registry.table_event(table), to='lobby', namespace=namespace)
                return

    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        _worker()
    else:
        socketio.start_background_task(_worker)
    return handle
