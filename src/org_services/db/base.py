"""
org_services.db.base

SQLAlchemy declarative base.

Responsibilities:
- Provide a shared DeclarativeBase for the department and employee models.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
