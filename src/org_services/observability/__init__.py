"""
org_services.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Trace id propagation for consistent log enrichment.
"""

# Package marker.
