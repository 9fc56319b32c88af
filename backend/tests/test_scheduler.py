import random

from speedwurdz import get_registry
from speedwurdz.services.games.scheduler import schedule_countdown
from speedwurdz.services.games.session import FINISHED, PLAYING, GameSession

NAMESPACE = '/ws'


class WatchedSession(GameSession):
    """Records whether the lock was held each time a countdown handle was attached."""

    def __setattr__(self, name, value):
        if name == 'countdown' and value is not None:
            self.handle_locked = self.lock._is_owned()
        super().__setattr__(name, value)


def counting_table(flask_app, dictionary):
    registry = get_registry()
    table = registry.create_table('alice')
    table.session = WatchedSession(table.id, ['alice'], dictionary=dictionary, rng=random.Random(7))
    table.session.start_countdown(3)
    return registry, table


def test_handle_attached_under_session_lock(flask_app, dictionary):
    registry, table = counting_table(flask_app, dictionary)
    handle = schedule_countdown(flask_app, registry, table, NAMESPACE)
    assert table.session.handle_locked is True
    assert handle.table_id == table.id
    assert not handle.cancelled


def test_inline_countdown_runs_to_play(flask_app, dictionary):
    registry, table = counting_table(flask_app, dictionary)
    schedule_countdown(flask_app, registry, table, NAMESPACE)
    assert table.session.status == PLAYING
    assert table.session.countdown is None
    assert len(table.session.player('alice').hand) == 10


def test_finished_session_does_not_tick(flask_app, dictionary):
    registry, table = counting_table(flask_app, dictionary)
    table.session.teardown()
    handle = schedule_countdown(flask_app, registry, table, NAMESPACE)
    assert table.session.status == FINISHED
    assert table.session.tiles == {}
    assert not handle.cancelled
