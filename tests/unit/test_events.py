"""Unit tests for event fan-out."""

import queue

import pytest
import tornado.escape

from CitySim.scheduling.events import EventPublisher, Subscriber, SubscriberClosed, encode_envelope


class TestSubscriber:
    """Tests for Subscriber."""

    def test_enqueue_and_drain(self):
        sub = Subscriber(maxsize=4)
        sub.enqueue("a")
        sub.enqueue("b")
        assert sub.drain() == ["a", "b"]
        assert sub.drain() == []

    def test_full_queue_raises(self):
        sub = Subscriber(maxsize=1)
        sub.enqueue("a")
        with pytest.raises(queue.Full):
            sub.enqueue("b")

    def test_closed_rejects(self):
        sub = Subscriber()
        sub.close()
        with pytest.raises(SubscriberClosed):
            sub.enqueue("a")

    def test_hooks(self):
        calls = []
        sub = Subscriber(on_message=lambda: calls.append("msg"), on_close=lambda: calls.append("close"))
        sub.enqueue("a")
        sub.close()
        sub.close()
        assert calls == ["msg", "close"]


class TestEventPublisher:
    """Tests for EventPublisher."""

    def test_envelope_shape(self):
        env = tornado.escape.json_decode(encode_envelope("tick", {"tick": 3}))
        assert env == {"type": "tick", "payload": {"tick": 3}}

    def test_broadcast_in_order(self):
        pub = EventPublisher()
        a = pub.subscribe(Subscriber())
        b = pub.subscribe(Subscriber())
        pub.publish("tick", {"tick": 1})
        pub.publish("tick", {"tick": 2})
        for sub in (a, b):
            ticks = [tornado.escape.json_decode(m)["payload"]["tick"] for m in sub.drain()]
            assert ticks == [1, 2]

    def test_slow_subscriber_dropped(self):
        pub = EventPublisher()
        closed = []
        slow = pub.subscribe(Subscriber(maxsize=1, on_close=lambda: closed.append(True)))
        fast = pub.subscribe(Subscriber(maxsize=10))
        pub.publish("tick", {})
        pub.publish("tick", {})
        assert pub.subscriber_count == 1
        assert slow.closed and closed == [True]
        assert len(fast.drain()) == 2

    def test_send_to_one(self):
        pub = EventPublisher()
        a = pub.subscribe(Subscriber())
        b = pub.subscribe(Subscriber())
        assert pub.send(a, "full_state", {})
        assert len(a.drain()) == 1
        assert b.drain() == []

    def test_unsubscribe(self):
        pub = EventPublisher()
        sub = pub.subscribe(Subscriber())
        pub.unsubscribe(sub)
        pub.unsubscribe(sub)
        pub.publish("tick", {})
        assert sub.drain() == []
        assert pub.subscriber_count == 0
