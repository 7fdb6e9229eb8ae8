"""Domain errors raised by the services layer.

Every failure a caller can observe is a ``SiwesError`` subclass carrying the
HTTP status and a stable machine-readable code. The application registers a
single error handler that renders them through ``handle_error``.
"""
from typing import Optional


class SiwesError(Exception):
    """Base class for all expected failures."""

    status_code = 400
    code = 'SIWES_ERROR'
    default_message = 'Request could not be completed'

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code


# =================== VALIDATION ===================

class ValidationError(SiwesError):
    code = 'VALIDATION_ERROR'
    default_message = 'Invalid request data'


# =================== PRECONDITIONS ===================

class PreconditionError(SiwesError):
    code = 'PRECONDITION_FAILED'


class NotAssigned(PreconditionError):
    code = 'NOT_ASSIGNED'
    default_message = 'Not assigned'


class StartDateMissing(PreconditionError):
    code = 'START_DATE_MISSING'
    default_message = 'SIWES start date not set'


class InvalidPresence(PreconditionError):
    code = 'INVALID_PRESENCE'
    default_message = 'Presence must be VALID to create log entry'


class WrongDay(PreconditionError):
    status_code = 403
    code = 'WRONG_DAY'
    default_message = 'Reviews can only be submitted on Fridays'


class PeriodNotEnded(PreconditionError):
    status_code = 403
    code = 'PERIOD_NOT_ENDED'
    default_message = 'SIWES period has not ended'


class SupervisorNotVerified(PreconditionError):
    code = 'SUPERVISOR_NOT_VERIFIED'
    default_message = 'Supervisor must be verified before assignment'


# =================== CONFLICTS ===================

class ConflictError(SiwesError):
    status_code = 409
    code = 'CONFLICT'


class EntryLocked(ConflictError):
    code = 'ENTRY_LOCKED'
    default_message = 'Entry is locked and cannot be modified'


class AlreadyReviewed(ConflictError):
    code = 'ALREADY_REVIEWED'
    default_message = 'Week already reviewed and locked'


class AlreadyInspected(ConflictError):
    code = 'ALREADY_INSPECTED'
    default_message = 'Final inspection already completed'


class DuplicateAssignment(ConflictError):
    code = 'DUPLICATE_ASSIGNMENT'
    default_message = 'Assignment already exists'


# =================== NOT FOUND ===================

class NotFound(SiwesError):
    status_code = 404
    code = 'NOT_FOUND'
    default_message = 'Resource not found'


class LocationNotFound(NotFound):
    code = 'LOCATION_NOT_FOUND'
    default_message = 'Location not found'


# =================== STORAGE ===================

class StorageError(SiwesError):
    status_code = 500
    code = 'STORAGE_ERROR'
    default_message = 'The request could not be stored'
