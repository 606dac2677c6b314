"""
Service-layer exceptions.

Services raise these; the API layer maps them onto HTTP status codes
through the handlers registered in castingfy.main.
"""


class CastingfyError(Exception):
    """Base exception for service operations."""

    status_code = 500

    def __init__(self, message: str, *, user_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.user_id = user_id


class ValidationError(CastingfyError):
    status_code = 400


class AuthenticationError(CastingfyError):
    status_code = 401


class PermissionDeniedError(CastingfyError):
    status_code = 403


class NotFoundError(CastingfyError):
    status_code = 404


class ConflictError(CastingfyError):
    status_code = 409


class UpstreamError(CastingfyError):
    """A hosted collaborator (storage, database) failed."""

    status_code = 500
