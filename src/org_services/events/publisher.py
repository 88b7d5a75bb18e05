"""
org_services.events.publisher

Outbound event boundary used by the department and employee services.

Responsibilities:
- Name the topics and the payload envelope (event type as Kafka key, JSON value).
- Publish through `aiokafka` when Kafka is enabled, or just log when it is not.
"""

from __future__ import annotations

import abc
import json
import time
from typing import Any

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from org_services.observability.logging import get_logger
from org_services.settings import Settings

log = get_logger(__name__)

EMPLOYEE_EVENTS_TOPIC = "employee-events"
DEPARTMENT_EVENTS_TOPIC = "department-events"
NOTIFICATIONS_TOPIC = "notifications"


def epoch_millis() -> int:
    return int(time.time() * 1000)


class EventPublisher(abc.ABC):
    @abc.abstractmethod
    async def publish(self, topic: str, event_type: str, payload: dict[str, Any]) -> None:
        ...

    async def send_employee_event(self, event_type: str, payload: dict[str, Any]) -> None:
        await self.publish(EMPLOYEE_EVENTS_TOPIC, event_type, payload)

    async def send_department_event(self, event_type: str, payload: dict[str, Any]) -> None:
        await self.publish(DEPARTMENT_EVENTS_TOPIC, event_type, payload)

    async def send_notification_event(self, event_type: str, payload: dict[str, Any]) -> None:
        await self.publish(NOTIFICATIONS_TOPIC, event_type, payload)

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None


class KafkaEventPublisher(EventPublisher):
    def __init__(self, *, bootstrap_servers: str, client_id: str) -> None:
        self._producer = AIOKafkaProducer(
            bootstrap_servers=bootstrap_servers,
            client_id=client_id,
            key_serializer=lambda k: k.encode("utf-8"),
            value_serializer=lambda v: json.dumps(v, default=str).encode("utf-8"),
        )

    async def start(self) -> None:
        await self._producer.start()

    async def stop(self) -> None:
        await self._producer.stop()

    async def publish(self, topic: str, event_type: str, payload: dict[str, Any]) -> None:
        try:
            await self._producer.send_and_wait(topic, value=payload, key=event_type)
        except KafkaError as e:
            # The entity change is already committed; losing the event is logged, not raised.
            log.warning("event_publish_failed", topic=topic, event_type=event_type, error=str(e))
            return
        log.info("event_published", topic=topic, event_type=event_type)


class LoggingEventPublisher(EventPublisher):
    async def publish(self, topic: str, event_type: str, payload: dict[str, Any]) -> None:
        log.info("event_published", topic=topic, event_type=event_type, payload=payload, sink="log")


def build_publisher(settings: Settings) -> EventPublisher:
    if settings.kafka_enabled:
        return KafkaEventPublisher(
            bootstrap_servers=settings.kafka_bootstrap_servers,
            client_id=f"{settings.service}-service",
        )
    return LoggingEventPublisher()
