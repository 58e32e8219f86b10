"""
Field Ops Exceptions

Typed errors raised by the service layer. The HTTP layer maps each one to
its status code.
"""

from typing import Any, Dict, Optional


class FieldOpsError(Exception):
    """Base exception for field ops errors"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


class NotFoundError(FieldOpsError):
    """Raised when an id does not resolve in its collection"""

    status_code = 404

    def __init__(self, resource: str, record_id: Any):
        super().__init__(f"{resource} not found", details={"resource": resource, "id": record_id})
        self.resource = resource
        self.record_id = record_id


class InvalidInputError(FieldOpsError):
    """Exception for request data that fails validation"""

    status_code = 400


class ConflictError(FieldOpsError):
    """Exception for operations that clash with the record's current state"""

    status_code = 409


class StorageError(FieldOpsError):
    """Exception for document store load/save failures"""

    status_code = 500
