from tracker.events import TRANSACTIONS_CHANGED, Event, EventBus


def test_publish_without_subscribers():
    bus = EventBus()
    assert bus.publish(TRANSACTIONS_CHANGED, {"transactions": ()}) == []


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []

    def first(event, payload):
        calls.append("first")
        return {"handler": "first"}

    def second(event, payload):
        calls.append("second")
        return {"handler": "second", "seen": event.payload is payload}

    bus.subscribe(TRANSACTIONS_CHANGED, first)
    bus.subscribe(TRANSACTIONS_CHANGED, second)
    results = bus.publish(TRANSACTIONS_CHANGED, {"transactions": ()})

    assert calls == ["first", "second"]
    assert results == [{"handler": "first"}, {"handler": "second", "seen": True}]


def test_event_carries_name_and_timestamp():
    bus = EventBus()
    received = []
    bus.subscribe("PING", lambda event, payload: received.append(event) or {})

    bus.publish("PING", {"n": 1})

    event = received[0]
    assert isinstance(event, Event)
    assert event.name == "PING"
    assert event.ts
    assert event.payload == {"n": 1}
