"""
org_services.services

Service layer package.

Responsibilities:
- Business rules and transaction boundaries between routers and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services receive their collaborators (session, clients, publisher) explicitly;
# `api.deps` is the only place that knows where those come from.
