"""Unit tests for lifecycle audit events.

Tests cover:
- Event creation and serialization (dict, JSONL)
- Parsing events back from dicts
- Emitter dispatch order, unsubscription and listener isolation
"""

import json
import logging
from datetime import datetime, timezone

import pytest

from statusflow.events import EventEmitter, LifecycleEvent
from statusflow.types import Actor, ActorKind, EventType


def make_event(event_type=EventType.TRANSITION_OPENED, **overrides):
    values = dict(
        event_id="evt_001",
        type=event_type,
        object_type="invoice",
        record_id="inv_1",
        ts=datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc),
        actor=Actor(kind=ActorKind.HUMAN, id="user_7", name="Ana", role="ADMIN_EMPLOYEE"),
        from_status="PENDING",
        to_status="VALIDATED",
    )
    values.update(overrides)
    return LifecycleEvent(**values)


class TestLifecycleEvent:
    """Test event creation and serialization."""

    def test_to_dict(self):
        data = make_event(payload={"missing": ["dueDate"]}).to_dict()
        assert data == {
            "eventId": "evt_001",
            "type": "transition.opened",
            "objectType": "invoice",
            "recordId": "inv_1",
            "ts": "2024-03-15T10:30:00+00:00",
            "actor": {"kind": "human", "id": "user_7", "name": "Ana", "role": "ADMIN_EMPLOYEE"},
            "fromStatus": "PENDING",
            "toStatus": "VALIDATED",
            "payload": {"missing": ["dueDate"]},
        }

    def test_payload_omitted_when_none(self):
        assert "payload" not in make_event().to_dict()

    def test_to_jsonl_is_single_line(self):
        line = make_event().to_jsonl()
        assert "\n" not in line
        assert json.loads(line)["type"] == "transition.opened"

    def test_from_dict(self):
        original = make_event(EventType.TRANSITION_OVERRIDDEN, to_status="DISCREPANCY")
        parsed = LifecycleEvent.from_dict(original.to_dict())
        assert parsed == original
        assert parsed.ts.tzinfo is not None

    def test_from_dict_parses_zulu_timestamps(self):
        data = make_event().to_dict()
        data["ts"] = "2024-03-15T10:30:00Z"
        assert LifecycleEvent.from_dict(data).ts == datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)

    def test_string_type_and_dict_actor_are_normalized(self):
        event = make_event("transition.closed", actor={"kind": "system", "id": "statusflow"})
        assert event.type is EventType.TRANSITION_CLOSED
        assert event.actor.kind is ActorKind.SYSTEM


class TestEventEmitter:
    """Test listener registration and dispatch."""

    def test_type_listeners_run_before_wildcards(self):
        emitter = EventEmitter()
        calls = []
        emitter.on_any(lambda e: calls.append("any"))
        emitter.on(EventType.TRANSITION_OPENED, lambda e: calls.append("typed"))
        emitter.emit(make_event())
        assert calls == ["typed", "any"]

    def test_only_matching_type_is_dispatched(self):
        emitter = EventEmitter()
        seen = []
        emitter.on(EventType.TRANSITION_OVERRIDDEN, seen.append)
        emitter.emit(make_event(EventType.TRANSITION_COMPLETED))
        assert seen == []

    def test_off(self):
        emitter = EventEmitter()
        seen = []
        emitter.on(EventType.TRANSITION_OPENED, seen.append)
        emitter.off(EventType.TRANSITION_OPENED, seen.append)
        emitter.off(EventType.TRANSITION_CLOSED, seen.append)
        emitter.emit(make_event())
        assert seen == []

    def test_off_any(self):
        emitter = EventEmitter()
        seen = []
        emitter.on_any(seen.append)
        emitter.off_any(seen.append)
        emitter.emit(make_event())
        assert seen == []

    def test_failing_listener_is_isolated_and_logged(self, caplog):
        emitter = EventEmitter()
        seen = []

        def broken(event):
            raise RuntimeError("audit sink down")

        emitter.on(EventType.TRANSITION_OPENED, broken)
        emitter.on_any(seen.append)
        with caplog.at_level(logging.ERROR, logger="statusflow"):
            emitter.emit(make_event())

        assert len(seen) == 1
        failures = [r for r in caplog.records if r.getMessage() == "event_listener_failed"]
        assert len(failures) == 1
        assert failures[0].event_id == "evt_001"
        assert failures[0].exc_info[0] is RuntimeError

    def test_listener_count_and_clear(self):
        emitter = EventEmitter()
        emitter.on(EventType.TRANSITION_OPENED, lambda e: None)
        emitter.on(EventType.TRANSITION_CLOSED, lambda e: None)
        emitter.on_any(lambda e: None)
        assert emitter.listener_count() == 3
        assert emitter.listener_count(EventType.TRANSITION_OPENED) == 1
        emitter.clear()
        assert emitter.listener_count() == 0


@pytest.mark.parametrize(
    "event_type",
    list(EventType),
    ids=lambda t: t.value,
)
def test_every_event_type_serializes(event_type):
    assert make_event(event_type).to_dict()["type"] == event_type.value
