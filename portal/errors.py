"""
Error taxonomy shared by the services and the web layer.

Every failure a visitor can trigger maps to one of these; routes turn them
into a flashed message and the page stays usable.
"""

GENERIC_MESSAGE = 'Something went wrong. Please try again.'


class PortalError(Exception):
    """Base class for failures scoped to a single action."""

    user_message = GENERIC_MESSAGE

    def __init__(self, message=None):
        super().__init__(message or self.user_message)
        if message:
            self.user_message = message


class AccessDenied(PortalError):
    """Write refused by policy, or target row not visible to the caller."""

    user_message = 'The record was not found or you do not have permission to change it.'


class ValidationFailed(PortalError):
    """Missing required field or malformed input."""

    user_message = 'Please check the form and try again.'


class DuplicateRecord(ValidationFailed):
    """A uniqueness constraint rejected the write."""

    user_message = 'That record already exists.'


class StoreUnavailable(PortalError):
    """The database could not be reached or failed mid-write."""

    user_message = 'The service is temporarily unavailable. Please try again.'
