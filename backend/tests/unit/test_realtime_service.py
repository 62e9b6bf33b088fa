"""
Unit tests for RealtimeManager outboxes.
"""

from app.services.realtime_service import CLOSE, RealtimeManager


def test_publish_is_ordered_per_session():
    manager = RealtimeManager()
    outbox = manager.connect("s1")

    manager.publish("s1", "a")
    manager.publish("s1", "b")

    assert [outbox.get_nowait(), outbox.get_nowait()] == ["a", "b"]


def test_publish_to_unknown_session_is_a_no_op():
    manager = RealtimeManager()

    assert manager.publish("ghost", "a") is False


def test_full_outbox_hands_session_to_overflow_handler():
    dropped = []
    manager = RealtimeManager(max_queue_size=2, on_overflow=dropped.append)
    outbox = manager.connect("slow")

    assert manager.publish("slow", "a") is True
    assert manager.publish("slow", "b") is True
    assert manager.publish("slow", "c") is False

    assert dropped == ["slow"]
    assert outbox.qsize() == 2


def test_full_outbox_without_handler_drops_the_frame():
    manager = RealtimeManager(max_queue_size=1)
    outbox = manager.connect("slow")
    manager.publish("slow", "a")

    assert manager.publish("slow", "b") is False
    assert outbox.get_nowait() == "a"


def test_disconnect_of_full_outbox_still_delivers_close():
    manager = RealtimeManager(max_queue_size=2)
    outbox = manager.connect("slow")
    manager.publish("slow", "a")
    manager.publish("slow", "b")

    assert manager.disconnect("slow") is True

    assert outbox.qsize() == 1
    assert outbox.get_nowait() is CLOSE


def test_zero_limit_means_unbounded():
    manager = RealtimeManager(max_queue_size=0)
    outbox = manager.connect("s1")

    delivered = [manager.publish("s1", str(i)) for i in range(5000)]

    assert all(delivered)
    assert outbox.qsize() == 5000
