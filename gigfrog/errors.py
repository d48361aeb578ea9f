"""
API error taxonomy. Services raise these; create_app() turns them into JSON responses.
"""


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class ValidationFailed(ApiError):
    status_code = 400
    default_message = 'Invalid request'


class Unauthorized(ApiError):
    status_code = 401
    default_message = 'Unauthorized'


class Forbidden(ApiError):
    status_code = 403
    default_message = 'Forbidden'


class NotFound(ApiError):
    status_code = 404
    default_message = 'Not found'


class Conflict(ApiError):
    """Duplicate save or an illegal status transition."""
    status_code = 400
    default_message = 'Conflict'


class UpstreamError(ApiError):
    """A fetched resource answered with a non-2xx status; that status is passed through."""
    default_message = 'Upstream request failed'

    def __init__(self, message=None, status_code=502):
        super().__init__(message)
        self.status_code = status_code
