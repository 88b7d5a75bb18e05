"""
tests.test_events

Event publishing and consumption without a broker.

Responsibilities:
- Topic routing on the publisher base class and the logging publisher.
- Per-service handler routing and the consumer's dispatch error handling.
"""

from __future__ import annotations

import json

import pytest

from org_services.events.consumer import EventConsumer, decode_value
from org_services.events.handlers import (
    handle_department_event,
    handle_employee_event,
    handle_notification_event,
    handlers_for,
)
from org_services.events.publisher import (
    DEPARTMENT_EVENTS_TOPIC,
    EMPLOYEE_EVENTS_TOPIC,
    NOTIFICATIONS_TOPIC,
    KafkaEventPublisher,
    LoggingEventPublisher,
    build_publisher,
)
from org_services.settings import Settings


@pytest.mark.asyncio
async def test_publisher_routes_to_topics(publisher) -> None:
    await publisher.send_employee_event("EMPLOYEE_CREATED", {"employeeId": 1})
    await publisher.send_department_event("DEPARTMENT_DELETED", {"departmentId": 2})
    await publisher.send_notification_event("SYSTEM", {"message": "hi"})

    assert [(t, k) for t, k, _ in publisher.events] == [
        (EMPLOYEE_EVENTS_TOPIC, "EMPLOYEE_CREATED"),
        (DEPARTMENT_EVENTS_TOPIC, "DEPARTMENT_DELETED"),
        (NOTIFICATIONS_TOPIC, "SYSTEM"),
    ]


@pytest.mark.asyncio
async def test_logging_publisher_is_default() -> None:
    pub = build_publisher(Settings(env="test"))
    assert isinstance(pub, LoggingEventPublisher)

    await pub.start()
    await pub.send_notification_event("SYSTEM", {"message": "hello"})
    await pub.stop()


@pytest.mark.asyncio
async def test_kafka_publisher_when_enabled() -> None:
    # aiokafka binds the running loop at construction, so this runs inside one.
    pub = build_publisher(Settings(env="test", kafka_enabled=True, service="department"))
    assert isinstance(pub, KafkaEventPublisher)


def test_handlers_for_each_service() -> None:
    assert handlers_for("department") == {
        EMPLOYEE_EVENTS_TOPIC: handle_employee_event,
        NOTIFICATIONS_TOPIC: handle_notification_event,
    }
    assert handlers_for("employee") == {
        DEPARTMENT_EVENTS_TOPIC: handle_department_event,
        NOTIFICATIONS_TOPIC: handle_notification_event,
    }
    assert handlers_for("product") == {}


@pytest.mark.asyncio
async def test_handlers_accept_known_and_unknown_types() -> None:
    await handle_employee_event({"eventType": "EMPLOYEE_UPDATED", "employeeId": 1})
    await handle_employee_event({"eventType": "EMPLOYEE_PROMOTED"})
    await handle_department_event({"eventType": "DEPARTMENT_CREATED", "departmentId": 3})
    await handle_department_event({})
    await handle_notification_event({"eventType": "SYSTEM", "recipient": "a@b.c", "message": "m"})


def test_decode_value() -> None:
    assert decode_value(json.dumps({"eventType": "X"}).encode()) == {"eventType": "X"}
    assert decode_value(None) is None
    assert decode_value(b"not json") is None
    assert decode_value(b"[1, 2]") is None
    assert decode_value(b"\xff\xfe") is None


@pytest.mark.asyncio
async def test_dispatch_routes_and_survives_failures() -> None:
    received: list[dict] = []

    async def good(event: dict) -> None:
        received.append(event)

    async def broken(event: dict) -> None:
        raise RuntimeError("handler bug")

    consumer = EventConsumer(
        bootstrap_servers="localhost:9092",
        group_id="test-group",
        handlers={"good": good, "broken": broken},
    )

    await consumer.dispatch("good", b'{"eventType": "A"}')
    await consumer.dispatch("broken", b'{"eventType": "B"}')
    await consumer.dispatch("good", b"garbage")
    await consumer.dispatch("unrouted", b'{"eventType": "C"}')
    await consumer.dispatch("good", b'{"eventType": "D"}')

    assert [e["eventType"] for e in received] == ["A", "D"]


@pytest.mark.asyncio
async def test_consumer_without_handlers_does_not_connect() -> None:
    consumer = EventConsumer(bootstrap_servers="localhost:1", group_id="g", handlers={})
    await consumer.start()
    await consumer.stop()
