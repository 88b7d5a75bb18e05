"""
org_services.api

API package for the org services.

Responsibilities:
- FastAPI app factories and router modules.
- API-layer dependency wiring and problem-detail error rendering.
"""

# Package marker.
