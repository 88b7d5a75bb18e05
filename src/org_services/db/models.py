"""
org_services.db.models

Persistence schema for the department and employee services.

Responsibilities:
- Department: organisational unit identified by a unique short code.
- Employee: person record with a unique email and an optional department reference.
"""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from org_services.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    # Departments live in the department service's database; no FK across services.
    department_id: Mapped[int | None] = mapped_column(nullable=True, index=True)


# --- Module Notes -----------------------------------------------------------
# Both services share this module; each deployment points `database_url` at its own
# database and simply leaves the other table empty.
