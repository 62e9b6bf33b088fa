"""
Unit tests for BackgroundScheduler session reaping.
"""

from app.core.config import Settings
from app.services.background_scheduler import BackgroundScheduler
from app.services.realtime_hub import RealtimeHub


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _settings(**overrides) -> Settings:
    values = {"ENVIRONMENT": "local", "PRESENCE_SESSION_TIMEOUT_SECONDS": 60}
    values.update(overrides)
    return Settings(**values)


class TestStart:
    async def test_disabled_in_test_environment(self):
        scheduler = BackgroundScheduler(RealtimeHub(), _settings(ENVIRONMENT="test"))

        await scheduler.start()

        assert scheduler.running is False

    async def test_disabled_when_timeout_is_zero(self):
        scheduler = BackgroundScheduler(
            RealtimeHub(), _settings(PRESENCE_SESSION_TIMEOUT_SECONDS=0)
        )

        await scheduler.start()

        assert scheduler.running is False

    async def test_start_and_stop(self):
        scheduler = BackgroundScheduler(RealtimeHub(), _settings())

        await scheduler.start()
        assert scheduler.running is True

        await scheduler.stop()
        assert scheduler.running is False


class TestSessionReaper:
    async def test_reaps_only_idle_sessions(self):
        clock = FakeClock()
        hub = RealtimeHub(clock=clock)
        idle, _ = hub.connect()
        active, _ = hub.connect()
        hub.register(idle.id, "idle-user")
        scheduler = BackgroundScheduler(hub, _settings())

        clock.now = 45
        hub.touch(active.id)
        clock.now = 90

        reaped = await scheduler._run_session_reaper()

        assert reaped == [idle.id]
        assert hub.session_count() == 1
        assert not hub.registry.is_online("idle-user")

    async def test_nothing_to_reap(self):
        hub = RealtimeHub(clock=FakeClock())
        hub.connect()

        assert await BackgroundScheduler(hub, _settings())._run_session_reaper() == []
