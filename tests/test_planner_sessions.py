"""Tests for the planner session registry limits."""

from app.services.planner_sessions import PlannerSessions


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestPlannerSessions:
    """Tests for idle expiry and the session cap."""

    def test_owner_scoped(self):
        sessions = PlannerSessions()
        session_id, editor = sessions.open("alice")
        assert sessions.get(session_id, "alice") is editor
        assert sessions.get(session_id, "bob") is None
        assert not sessions.close(session_id, "bob")
        assert sessions.close(session_id, "alice")
        assert len(sessions) == 0

    def test_idle_session_expires(self):
        clock = FakeClock()
        sessions = PlannerSessions(idle_seconds=60, clock=clock)
        session_id, _ = sessions.open()
        clock.now += 61
        assert sessions.get(session_id) is None
        assert len(sessions) == 0

    def test_use_keeps_session_alive(self):
        clock = FakeClock()
        sessions = PlannerSessions(idle_seconds=60, clock=clock)
        session_id, editor = sessions.open()
        for _ in range(3):
            clock.now += 45
            assert sessions.get(session_id) is editor

    def test_expired_sessions_dropped_on_open(self):
        clock = FakeClock()
        sessions = PlannerSessions(idle_seconds=60, clock=clock)
        for _ in range(5):
            sessions.open()
        clock.now += 120
        sessions.open()
        assert len(sessions) == 1

    def test_cap_evicts_least_recently_used(self):
        clock = FakeClock()
        sessions = PlannerSessions(max_sessions=2, clock=clock)
        first, _ = sessions.open()
        second, _ = sessions.open()
        clock.now += 1
        assert sessions.get(first) is not None
        third, _ = sessions.open()
        assert len(sessions) == 2
        assert sessions.get(second) is None
        assert sessions.get(first) is not None
        assert sessions.get(third) is not None
