"""
Error Types

Failure categories raised by the services and mapped to HTTP responses by the webapp.
"""


class LyricMatchError(Exception):
    """Base class for all application errors."""

    status_code = 500
    code = "error"

    def to_dict(self):
        return {'error': self.code, 'message': str(self)}


class ValidationError(LyricMatchError):
    status_code = 400
    code = "validation_error"


class ConflictError(LyricMatchError):
    status_code = 409
    code = "conflict"


class NotFoundError(LyricMatchError):
    status_code = 404
    code = "not_found"

    def __init__(self, message, username=None):
        super().__init__(message)
        self.username = username

    def to_dict(self):
        data = super().to_dict()
        if self.username is not None:
            data['username'] = self.username
        return data


class PrivacyError(LyricMatchError):
    status_code = 403
    code = "private"

    def __init__(self, message, username=None):
        super().__init__(message)
        self.username = username

    def to_dict(self):
        data = super().to_dict()
        if self.username is not None:
            data['username'] = self.username
        return data


class LockedError(LyricMatchError):
    status_code = 423
    code = "locked"

    def __init__(self, message, locked_until=None):
        super().__init__(message)
        self.locked_until = locked_until

    def to_dict(self):
        data = super().to_dict()
        if self.locked_until is not None:
            data['locked_until'] = self.locked_until.isoformat()
        return data


class PersistenceError(LyricMatchError):
    status_code = 500
    code = "persistence_error"
