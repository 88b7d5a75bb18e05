"""
org_services.events.consumer

Background Kafka consumer loop.

Responsibilities:
- Subscribe to the topics routed by `events.handlers.handlers_for`.
- Decode JSON values and dispatch them to the topic's handler.
- Keep consuming when an individual message or handler fails.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import Mapping
from typing import Any

from aiokafka import AIOKafkaConsumer

from org_services.events.handlers import Handler
from org_services.observability.logging import get_logger

log = get_logger(__name__)


def decode_value(raw: bytes | None) -> dict[str, Any] | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return value if isinstance(value, dict) else None


class EventConsumer:
    def __init__(
        self,
        *,
        bootstrap_servers: str,
        group_id: str,
        handlers: Mapping[str, Handler],
    ) -> None:
        self._bootstrap_servers = bootstrap_servers
        self._group_id = group_id
        self._handlers = dict(handlers)
        self._consumer: AIOKafkaConsumer | None = None
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if not self._handlers:
            return
        self._consumer = AIOKafkaConsumer(
            *self._handlers.keys(),
            bootstrap_servers=self._bootstrap_servers,
            group_id=self._group_id,
            auto_offset_reset="latest",
        )
        await self._consumer.start()
        self._task = asyncio.create_task(self._run(), name=f"kafka-consumer-{self._group_id}")
        log.info("consumer_started", group_id=self._group_id, topics=sorted(self._handlers))

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        if self._consumer is not None:
            await self._consumer.stop()
            self._consumer = None
        log.info("consumer_stopped", group_id=self._group_id)

    async def _run(self) -> None:
        assert self._consumer is not None
        async for message in self._consumer:
            await self.dispatch(message.topic, message.value)

    async def dispatch(self, topic: str, raw: bytes | None) -> None:
        handler = self._handlers.get(topic)
        if handler is None:
            return
        event = decode_value(raw)
        if event is None:
            log.warning("undecodable_event", topic=topic)
            return
        try:
            await handler(event)
        except Exception:
            log.exception("event_handler_failed", topic=topic, event_type=event.get("eventType"))
