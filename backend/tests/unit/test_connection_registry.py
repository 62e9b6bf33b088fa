"""
Unit tests for ConnectionRegistry.

Covers last-registration-wins and stale unregister handling.
"""

from app.models.enums import PresenceStatus
from app.services.connection_registry import ConnectionRegistry


def _registry_with_log():
    registry = ConnectionRegistry()
    log: list[tuple[str, PresenceStatus]] = []
    registry.add_listener(lambda user_id, status: log.append((user_id, status)))
    return registry, log


class TestRegister:
    def test_register_marks_user_online(self):
        registry, log = _registry_with_log()

        registry.register("alice", "s1")

        assert registry.is_online("alice")
        assert registry.session_for("alice") == "s1"
        assert registry.user_for("s1") == "alice"
        assert log == [("alice", PresenceStatus.ONLINE)]

    def test_second_registration_supersedes_first(self):
        registry, _ = _registry_with_log()

        registry.register("alice", "s1")
        result = registry.register("alice", "s2")

        assert result.superseded_session_id == "s1"
        assert registry.session_for("alice") == "s2"
        assert registry.user_for("s1") is None

    def test_repeated_identical_registration_is_not_a_transition(self):
        registry, log = _registry_with_log()

        registry.register("alice", "s1")
        result = registry.register("alice", "s1")

        assert result.changed is False
        assert log == [("alice", PresenceStatus.ONLINE)]

    def test_session_switching_identity_takes_previous_user_offline(self):
        registry, log = _registry_with_log()

        registry.register("alice", "s1")
        registry.register("bob", "s1")

        assert not registry.is_online("alice")
        assert registry.session_for("bob") == "s1"
        assert ("alice", PresenceStatus.OFFLINE) in log


class TestUnregister:
    def test_stale_unregister_keeps_user_online(self):
        registry, log = _registry_with_log()

        registry.register("u", "s1")
        registry.register("u", "s2")
        assert registry.unregister("s1") is None

        assert registry.is_online("u")
        assert registry.session_for("u") == "s2"
        assert ("u", PresenceStatus.OFFLINE) not in log

    def test_unregister_current_session_goes_offline(self):
        registry, log = _registry_with_log()

        registry.register("u", "s1")
        assert registry.unregister("s1") == "u"

        assert not registry.is_online("u")
        assert log[-1] == ("u", PresenceStatus.OFFLINE)

    def test_unregister_unknown_session_is_noop(self):
        registry, log = _registry_with_log()

        assert registry.unregister("ghost") is None
        assert log == []

    def test_reregistering_old_session_after_supersede(self):
        registry, _ = _registry_with_log()

        registry.register("u", "s1")
        registry.register("u", "s2")
        registry.register("u", "s1")

        assert registry.unregister("s2") is None
        assert registry.session_for("u") == "s1"


def test_list_online_returns_registered_users():
    registry = ConnectionRegistry()
    registry.register("alice", "s1")
    registry.register("bob", "s2")
    registry.unregister("s2")

    assert registry.list_online() == {"alice"}
