from celery.schedules import crontab
from redis.exceptions import LockError

from leave_api import worker
from leave_api.config.settings import Settings
from leave_api.services.communication import SweepResult


class FakeLock:
    def __init__(self, free=True, release_error=False):
        self.free = free
        self.release_error = release_error
        self.released = False

    def acquire(self, blocking=True):
        return self.free

    def release(self):
        if self.release_error:
            raise LockError("Cannot release an unlocked lock")
        self.released = True


class FakeRedis:
    def __init__(self, lock):
        self._lock = lock
        self.requested = []

    def lock(self, name, timeout=None, blocking=True):
        self.requested.append((name, timeout, blocking))
        return self._lock


class FakeSweep:
    def __init__(self):
        self.runs = 0

    def run(self):
        self.runs += 1
        return SweepResult(notified=2, purged=1)


def test_beat_runs_sweep_daily_at_configured_local_time():
    app = worker.build_celery(
        Settings(SWEEP_HOUR=6, SWEEP_MINUTE=30, SWEEP_TIMEZONE="Asia/Kolkata")
    )

    entry = app.conf.beat_schedule["daily-reminder-sweep"]
    assert entry["task"] == worker.SWEEP_TASK_NAME
    assert isinstance(entry["schedule"], crontab)
    assert entry["schedule"].hour == {6}
    assert entry["schedule"].minute == {30}
    assert app.conf.timezone == "Asia/Kolkata"


def test_sweep_task_is_registered():
    assert worker.SWEEP_TASK_NAME in worker.celery_app.tasks


def test_sweep_runs_under_the_lock():
    lock = FakeLock()
    client = FakeRedis(lock)
    sweep = FakeSweep()

    result = worker.run_exclusive(sweep, client, lock_timeout=300)

    assert result.notified == 2
    assert sweep.runs == 1
    assert lock.released
    assert client.requested == [(worker.SWEEP_LOCK_NAME, 300, False)]


def test_concurrent_run_is_skipped():
    sweep = FakeSweep()
    assert worker.run_exclusive(sweep, FakeRedis(FakeLock(free=False)), lock_timeout=300) is None
    assert sweep.runs == 0


def test_expired_lock_does_not_hide_the_result():
    sweep = FakeSweep()
    result = worker.run_exclusive(
        sweep, FakeRedis(FakeLock(release_error=True)), lock_timeout=1
    )
    assert result.purged == 1
