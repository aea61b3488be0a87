class ServiceError(Exception):
    """Base error raised by the service layer, converted to JSON by the views."""
    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors

    def to_dict(self):
        body = {"msg": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidInput(ServiceError):
    status_code = 400
    default_message = "Invalid input"


class NotAuthenticated(ServiceError):
    status_code = 401
    default_message = "Not authenticated"


class PermissionDenied(ServiceError):
    status_code = 403
    default_message = "You do not have permission for this action"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found"


class Conflict(ServiceError):
    status_code = 409
    default_message = "Conflict"


class StorageError(ServiceError):
    status_code = 500
    default_message = "Server error"


class ProviderError(ServiceError):
    """An external provider (push service, OAuth server) failed."""
    status_code = 502
    default_message = "External service error"
