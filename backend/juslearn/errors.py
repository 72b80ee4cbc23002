"""Service-level error taxonomy.

Services raise these exceptions; the application maps them to a JSON
``{"message": ...}`` body with the matching HTTP status code.
"""


class ServiceError(Exception):
    """Base class for errors that carry an HTTP status and a public message."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Required input is missing."""
    status_code = 400


class AuthError(ServiceError):
    """Bad credentials. Deliberately undifferentiated."""
    status_code = 401


class ConflictError(ServiceError):
    """A uniqueness constraint rejected the write."""
    status_code = 409


class InternalError(ServiceError):
    """Store, hashing or filesystem failure."""
    status_code = 500
