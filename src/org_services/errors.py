"""
org_services.errors

Domain exceptions raised by services and repositories.

Responsibilities:
- Carry the HTTP status and problem title each failure maps to, so the API
  layer can render them without knowing individual exception types.
"""

from __future__ import annotations


class ServiceError(Exception):
    status: int = 500
    title: str = "Internal Server Error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ServiceError):
    status = 404
    title = "Resource Not Found"


class DepartmentNotFound(NotFoundError):
    pass


class EmployeeNotFound(NotFoundError):
    pass


class DuplicateKeyError(ServiceError):
    status = 409
    title = "Duplicate Key"


class DuplicateCode(DuplicateKeyError):
    title = "Duplicate Code"


class DuplicateEmail(DuplicateKeyError):
    title = "Duplicate Email"


class BusinessRuleError(ServiceError):
    status = 409
    title = "Business Rule Violation"


class BadRequestError(ServiceError):
    status = 400
    title = "Bad Request"


class InvalidSortError(BadRequestError):
    pass
