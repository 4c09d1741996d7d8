"""
Request-scoped errors for the club core.

Every error carries the HTTP status it maps to, so routes can simply raise
and let the app-level error handler render the JSON envelope.
"""


class ClubError(Exception):
    """Base class for errors surfaced to the caller."""
    status_code = 400
    default_message = 'request failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'ok': False, 'error': self.message}


class InvalidInput(ClubError):
    status_code = 400
    default_message = 'invalid input'


class NotFound(ClubError):
    status_code = 404
    default_message = 'not found'


class NotRegistered(NotFound):
    default_message = 'not registered'


class Unauthorized(ClubError):
    status_code = 401
    default_message = 'auth required'


class BadCredentials(Unauthorized):
    default_message = 'bad code'


class Forbidden(ClubError):
    status_code = 403
    default_message = 'forbidden'


class NotApproved(Forbidden):
    """Member exists but is not approved; the message is the current status."""

    def __init__(self, status):
        super().__init__(status)
        self.status = status

    def to_dict(self):
        return {'ok': False, 'error': self.status, 'status': self.status}


class Conflict(ClubError):
    status_code = 409
    default_message = 'conflict'


class RateLimited(ClubError):
    status_code = 429
    default_message = 'too many requests'

    def __init__(self, retry_after, message=None):
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self):
        return {'ok': False, 'error': self.message, 'retryAfter': self.retry_after}


class DeliveryError(Exception):
    """An SMS or push provider rejected a send. Never reaches the caller."""

    def __init__(self, channel, recipient, message):
        super().__init__(f"{channel} delivery to {recipient} failed: {message}")
        self.channel = channel
        self.recipient = recipient
        self.message = message
