"""
org_services.events.handlers

Handlers for events consumed from peer services.

Responsibilities:
- Department service: react to employee lifecycle events and notifications.
- Employee service: react to department lifecycle events and notifications.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from org_services.events.publisher import (
    DEPARTMENT_EVENTS_TOPIC,
    EMPLOYEE_EVENTS_TOPIC,
    NOTIFICATIONS_TOPIC,
)
from org_services.observability.logging import get_logger

log = get_logger(__name__)

Handler = Callable[[dict[str, Any]], Awaitable[None]]

EMPLOYEE_EVENT_TYPES = frozenset({"EMPLOYEE_CREATED", "EMPLOYEE_UPDATED", "EMPLOYEE_DELETED"})
DEPARTMENT_EVENT_TYPES = frozenset(
    {"DEPARTMENT_CREATED", "DEPARTMENT_UPDATED", "DEPARTMENT_DELETED"}
)


async def handle_employee_event(event: dict[str, Any]) -> None:
    event_type = event.get("eventType")
    if event_type not in EMPLOYEE_EVENT_TYPES:
        log.warning("unknown_employee_event", event_type=event_type)
        return
    log.info(
        "employee_event_received",
        event_type=event_type,
        employee_id=event.get("employeeId"),
        department_id=event.get("departmentId"),
    )


async def handle_department_event(event: dict[str, Any]) -> None:
    event_type = event.get("eventType")
    if event_type not in DEPARTMENT_EVENT_TYPES:
        log.warning("unknown_department_event", event_type=event_type)
        return
    log.info(
        "department_event_received",
        event_type=event_type,
        department_id=event.get("departmentId"),
        code=event.get("code"),
    )


async def handle_notification_event(event: dict[str, Any]) -> None:
    log.info(
        "notification_received",
        event_type=event.get("eventType"),
        recipient=event.get("recipient"),
        message=event.get("message"),
    )


def handlers_for(service: str) -> Mapping[str, Handler]:
    """
    Topic -> handler routing for the service that is consuming.
    """

    if service == "department":
        return {
            EMPLOYEE_EVENTS_TOPIC: handle_employee_event,
            NOTIFICATIONS_TOPIC: handle_notification_event,
        }
    if service == "employee":
        return {
            DEPARTMENT_EVENTS_TOPIC: handle_department_event,
            NOTIFICATIONS_TOPIC: handle_notification_event,
        }
    return {}
