"""
org_services.events

Kafka event publication and consumption.

Responsibilities:
- Publish entity lifecycle events and notifications (`publisher`).
- Consume peer-service topics in a background task (`consumer`).
- Interpret consumed events (`handlers`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Publication is fire-and-forget: a broker outage degrades to log lines, never to
# failed HTTP requests.
