"""
org_services.clients

Outbound HTTP clients.

Responsibilities:
- Provide client interfaces for calling the department service and the FakeStore API.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on these classes, never on httpx directly, so tests can hand them
# an `httpx.AsyncClient` backed by `httpx.MockTransport`.
