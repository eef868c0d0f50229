"""
Service-layer errors

Services raise these instead of HTTP exceptions; the API layer maps each one
to its status code and returns {"detail": message}.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, extra: dict | None = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class InvalidInputError(ServiceError):
    status_code = 400


class ConflictError(ServiceError):
    """Unique constraint would be violated (duplicate email, symbol+date, ...)"""
    status_code = 400


class AuthenticationError(ServiceError):
    status_code = 401


class PermissionDeniedError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404
