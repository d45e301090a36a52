"""Errors raised by the timer service."""
from django.core.exceptions import ValidationError as DjangoValidationError


class TimerError(Exception):
    """Base class for timer failures surfaced to callers."""

    status_code = 400

    def __init__(self, message=''):
        super().__init__(message)
        self.message = message


class ConflictError(TimerError):
    """A timer is already running and the caller did not ask to close it."""

    status_code = 409

    def __init__(self, message='', active_entry=None):
        super().__init__(message)
        self.active_entry = active_entry


class InvalidCategoryError(TimerError):
    """Category does not exist or belongs to another user."""

    status_code = 400


class NotFoundError(TimerError):
    """No open time entry matches the request."""

    status_code = 404


class ValidationError(TimerError, DjangoValidationError):
    """Malformed duration or target input."""

    status_code = 400

    def __init__(self, message=''):
        DjangoValidationError.__init__(self, message)
        self.message = message
